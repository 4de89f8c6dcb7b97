"""
Error handling utilities for batch calling operations.

This module provides specialized exception classes and error handling
utilities for batch calling operations.
"""

from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class BatchError(Exception):
    """Base exception for batch operations."""
    pass


class CallError(BatchError):
    """Raised when a single call inside a batch is rejected by the node."""

    def __init__(self, message: str, address: Optional[str] = None,
                 method: Optional[str] = None, code: Optional[int] = None):
        super().__init__(message)
        self.address = address
        self.method = method
        self.code = code


class NetworkError(BatchError):
    """Raised when the batch round trip itself fails."""
    pass


class RegistrationError(BatchError):
    """Raised when an ABI cannot be registered in the interface cache."""
    pass


class RegistryError(RegistrationError):
    """Raised when the remote ABI registry rejects a lookup."""
    pass


class ValidationError(BatchError):
    """Raised when input validation fails."""
    pass


class ErrorHandler:
    """
    Centralized error classification and logging for batch operations.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for logging.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        if isinstance(error, RegistrationError):
            return 'registration'

        error_str = str(error).lower()

        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        if any(keyword in error_str for keyword in ['connection', 'timeout', 'network', 'dns']):
            return 'network'

        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        if any(keyword in error_str for keyword in ['invalid', 'bad request', '400']):
            return 'validation'

        return 'unknown'

    def log_error(self, error: Exception, context: Dict[str, Any]):
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging
        """
        error_category = self.classify_error(error)

        log_data = {
            'error_type': type(error).__name__,
            'error_category': error_category,
            'error_message': str(error),
            **context
        }

        if error_category == 'validation':
            self.logger.warning("Validation error occurred", extra=log_data)
        elif error_category == 'contract':
            self.logger.error("Contract execution failed", extra=log_data)
        elif error_category == 'rate_limit':
            self.logger.info("Rate limit encountered", extra=log_data)
        else:
            self.logger.warning("Batch operation error", extra=log_data)
