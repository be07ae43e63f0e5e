"""
Base classes for core functionality
"""
from .exceptions import BaseCoreException, ConfigurationException

__all__ = ['BaseCoreException', 'ConfigurationException']
