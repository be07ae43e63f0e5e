"""
Input normalization for pasted email text
"""
import re

# Mis-decoded UTF-8 punctuation (read as cp1252) and typographic characters
ENCODING_ARTIFACTS = (
    ("â€™", "'"),
    ("â€˜", "'"),
    ("â€œ", '"'),
    ("â€\u009d", '"'),
    ("â€”", "-"),
    ("â€“", "-"),
    ("â€¦", "..."),
    ("Â\u00a0", " "),
    ("‘", "'"),
    ("’", "'"),
    ("“", '"'),
    ("”", '"'),
    ("–", "-"),
    ("—", "-"),
    ("…", "..."),
    ("\u00a0", " "),
    ("\r\n", "\n"),
    ("\r", "\n"),
)

_INLINE_WS = re.compile(r"[ \t\f\v]+")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def clean_email_text(text) -> str:
    """
    Fix encoding artifacts and collapse whitespace.

    Line breaks are kept (signature heuristics depend on them); runs of
    spaces/tabs become one space, each line is stripped and more than one
    blank line in a row is squeezed to one.
    """
    if not text:
        return ""

    cleaned = str(text)
    for artifact, replacement in ENCODING_ARTIFACTS:
        cleaned = cleaned.replace(artifact, replacement)

    cleaned = _INLINE_WS.sub(" ", cleaned)
    cleaned = "\n".join(line.strip() for line in cleaned.split("\n"))
    cleaned = _EXTRA_BLANK_LINES.sub("\n\n", cleaned)
    return cleaned.strip()
