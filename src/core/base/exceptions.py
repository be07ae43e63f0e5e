"""
Core Base Exceptions
"""
from typing import Any, Dict, Optional


class BaseCoreException(Exception):
    """Base exception for core modules"""
    pass


class ConfigurationException(BaseCoreException):
    """Raised for invalid configuration (bad business hours, unsupported provider)"""

    def __init__(self, message: str, setting: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.setting = setting
        self.details = details or {}
        super().__init__(message)
