"""
Email Parsing Pipeline

clean text -> model extraction (when configured) -> field-level validation
against the heuristic extractors -> ParsedEmailRecord.

Failures of the model path are returned as outcome variants, never raised:
    ParsedOk      - the model produced the record
    FallbackUsed  - heuristics produced it (no model, transient failure,
                    malformed response reconstructed)
    FatalError    - credentials/quota problem or model required but absent
"""
import os
from typing import Iterable, Optional, Sequence, Tuple

from src.ai.exceptions import ModelErrorKind, ModelServiceError
from src.utils.config import Config, get_timezone
from src.utils.datetime import Clock, make_clock
from src.utils.intent import IntentKeywords, load_intent_keywords
from src.utils.logger import setup_logger

from .confidence import ConfidenceScorer
from .datetime_extractor import DateTimeExtractor
from .entity_extractor import EntityExtractor
from .intent_classifier import IntentClassifier
from .llm_extractor import ModelExtractor, ModelResponse
from .models import (
    FallbackUsed,
    FatalError,
    NO_EMAIL,
    NOT_SPECIFIED,
    ParsedEmailRecord,
    ParsedOk,
    ParseOutcome,
    REASONING_FALLBACK,
    REASONING_MODEL,
)
from .text_cleaner import clean_email_text

logger = setup_logger(__name__)

DEFAULT_MODEL_CONFIDENCE = 0.8


def build_participants(primary: str, candidates: Iterable[str], limit: int) -> Tuple[str, ...]:
    """
    Primary email first, then candidates containing '@', deduplicated by
    first appearance and capped at `limit`. Never empty.
    """
    ordered = []
    seen = set()
    for address in ([primary] if primary and primary != NO_EMAIL else []) + list(candidates):
        address = (address or "").strip()
        if '@' not in address or address.lower() in seen:
            continue
        seen.add(address.lower())
        ordered.append(address)
    return tuple(ordered[:limit]) or (NO_EMAIL,)


def _clamp_confidence(value: Optional[float]) -> float:
    if value is None:
        return DEFAULT_MODEL_CONFIDENCE
    return max(0.0, min(1.0, float(value)))


class EmailParsingPipeline:
    """
    Parses email text into a ParsedEmailRecord.

    Args:
        config: Loaded configuration (defaults when None)
        model_extractor: Model client; None runs the heuristic path only
        keywords: Intent phrase sets (loaded from config when None)
        clock: "now" for relative dates (configured timezone when None)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        model_extractor: Optional[ModelExtractor] = None,
        keywords: Optional[IntentKeywords] = None,
        clock: Optional[Clock] = None
    ):
        self.config = config or Config()
        self.clock = clock or make_clock(get_timezone(self.config))
        self.model_extractor = model_extractor

        if keywords is None:
            path = self.config.triage.keywords_path
            keywords = load_intent_keywords(path if path and os.path.exists(path) else None)

        self.datetime_extractor = DateTimeExtractor(self.clock)
        self.entity_extractor = EntityExtractor()
        self.intent_classifier = IntentClassifier(keywords)
        self.scorer = ConfidenceScorer.from_config(self.config.triage)
        self.max_participants = self.config.triage.max_participants

        logger.info(
            f"[Pipeline] Initialized (model={'on' if model_extractor else 'off'}, "
            f"max_participants={self.max_participants})"
        )

    @classmethod
    def from_config(cls, config: Config, clock: Optional[Clock] = None) -> "EmailParsingPipeline":
        """Pipeline with a model extractor when the config carries credentials."""
        clock = clock or make_clock(get_timezone(config))
        return cls(config, model_extractor=ModelExtractor.from_config(config, clock), clock=clock)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, email_text: str) -> ParsedEmailRecord:
        """Best available record for `email_text`. Never raises."""
        try:
            outcome = self.parse_with_outcome(email_text)
            if outcome.record is not None:
                return outcome.record
            return self.heuristic_parse(clean_email_text(email_text), "model error")
        except Exception as e:
            logger.error(f"[Pipeline] Unexpected parse failure: {e}", exc_info=True)
            return ParsedEmailRecord(
                confidence=self.scorer.base,
                reasoning=f"{REASONING_FALLBACK}: unexpected error"
            )

    def parse_with_outcome(self, email_text: str, require_model: bool = False) -> ParseOutcome:
        """
        Parse and report which path produced the record.

        Args:
            email_text: Raw email body
            require_model: Report a missing model as FatalError instead of falling back
        """
        cleaned = clean_email_text(email_text)

        if self.model_extractor is None:
            record = self.heuristic_parse(cleaned, "model not configured")
            if require_model:
                return FatalError(ModelErrorKind.NOT_CONFIGURED, "No language model configured", record)
            return FallbackUsed(record, "model not configured")

        if not cleaned:
            return FallbackUsed(self.heuristic_parse(cleaned, "empty input"), "empty input")

        try:
            raw = self.model_extractor.request(cleaned)
        except ModelServiceError as e:
            record = self.heuristic_parse(cleaned, f"model {e.kind.value}")
            if e.is_fatal:
                logger.error(f"[Pipeline] Model failure needs attention ({e.kind.value}): {e.message}")
                return FatalError(e.kind, e.message, record)
            logger.warning(f"[Pipeline] Model unavailable, using heuristics: {e.message}")
            return FallbackUsed(record, f"model unavailable: {e.message}")

        try:
            response = self.model_extractor.decode(raw)
        except ModelServiceError as e:
            logger.warning(f"[Pipeline] Malformed model response, reconstructing: {e.message}")
            try:
                record = self.heuristic_parse(cleaned, "reconstructed from malformed model response")
            except Exception as exc:
                logger.error(f"[Pipeline] Reconstruction failed: {exc}", exc_info=True)
                return FatalError(ModelErrorKind.PARSE, f"{e.message}; reconstruction failed: {exc}")
            return FallbackUsed(record, "malformed model response")

        record = self.adopt_model_response(response, cleaned)
        logger.info(f"[Pipeline] Model extraction adopted (intent={record.intent.value})")
        return ParsedOk(record)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def heuristic_parse(self, cleaned: str, reason: str) -> ParsedEmailRecord:
        """Pure heuristic extraction over already-cleaned text."""
        emails = self.entity_extractor.extract_emails(cleaned)
        contact_name = self.entity_extractor.extract_contact_name(cleaned)
        company = self.entity_extractor.extract_company(cleaned)
        datetime_text = self.datetime_extractor.extract(cleaned)
        intent = self.intent_classifier.classify(cleaned)
        primary = emails[0] if emails else NO_EMAIL

        return ParsedEmailRecord(
            contact_name=contact_name,
            email=primary,
            company=company,
            datetime=datetime_text,
            participants=build_participants(primary, emails, self.max_participants),
            intent=intent,
            confidence=self.scorer.score(contact_name, company, datetime_text, emails),
            reasoning=f"{REASONING_FALLBACK}: {reason}"
        )

    def adopt_model_response(self, response: ModelResponse, cleaned: str) -> ParsedEmailRecord:
        """Run model fields through the same validators as the fallback path."""
        emails = self.entity_extractor.extract_emails(cleaned)

        contact_name = (response.contactName or "").strip() or self.entity_extractor.extract_contact_name(cleaned)
        company = (response.company or "").strip() or self.entity_extractor.extract_company(cleaned)

        email = (response.email or "").strip()
        if '@' not in email:
            email = emails[0] if emails else NO_EMAIL

        datetime_text = (response.datetime or "").strip()
        if not datetime_text or datetime_text == NOT_SPECIFIED:
            datetime_text = self.datetime_extractor.extract(cleaned)

        candidates: Sequence[str] = response.participants if response.participants is not None else [email]
        intent = self.intent_classifier.coerce(response.intent) or self.intent_classifier.classify(cleaned)
        reasoning = (response.reasoning or "").strip() or "extracted by language model"

        return ParsedEmailRecord(
            contact_name=contact_name,
            email=email,
            company=company,
            datetime=datetime_text,
            participants=build_participants(email, candidates, self.max_participants),
            intent=intent,
            confidence=_clamp_confidence(response.confidence),
            reasoning=f"{REASONING_MODEL}: {reasoning}"
        )
