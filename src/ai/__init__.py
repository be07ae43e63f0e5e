"""
AI/LLM integration modules

Import the specific modules you need directly, e.g.:
    from src.ai.llm_factory import LLMFactory
    from src.ai.exceptions import ModelServiceError
"""
