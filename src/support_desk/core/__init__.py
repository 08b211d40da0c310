"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from support_desk.core.exceptions import (
    FieldError,
    ApplicationException,
    RepositoryException,
    ValidationException,
    ConflictException,
    ResourceNotFoundException,
    ConfigurationException,
)

__all__ = [
    "FieldError",
    "ApplicationException",
    "RepositoryException",
    "ValidationException",
    "ConflictException",
    "ResourceNotFoundException",
    "ConfigurationException",
]
