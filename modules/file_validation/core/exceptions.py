"""
Custom exceptions for file validation module.
"""


class FileValidationException(Exception):
    """Base exception for file validation module."""
    pass


class ConfigurationException(FileValidationException):
    """Exception raised for configuration errors."""
    pass


class RegistryException(FileValidationException):
    """Exception raised when a registry entry cannot be bound."""
    pass
