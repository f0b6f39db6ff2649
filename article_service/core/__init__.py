"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from article_service.core.exceptions import (
    ApplicationException,
    RepositoryException,
    DatabaseConnectionException,
    ValidationException,
    ConflictException,
    ResourceNotFoundException,
    OperationTimeoutException,
    ConfigurationException,
)

__all__ = [
    "ApplicationException",
    "RepositoryException",
    "DatabaseConnectionException",
    "ValidationException",
    "ConflictException",
    "ResourceNotFoundException",
    "OperationTimeoutException",
    "ConfigurationException",
]
