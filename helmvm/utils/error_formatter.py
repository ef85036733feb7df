# -*- coding: utf-8 -*-
"""Location: ./helmvm/utils/error_formatter.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Centralized formatting for request validation and backend errors.
This module turns Pydantic validation errors raised by the request schemas,
and the backend and values editor exceptions, into the user-facing
error payload shown next to the failed action.

The ErrorFormatter class handles:
- Pydantic ValidationError formatting
- Backend, registry store and values editor exception formatting
- Mapping technical error messages to user-friendly explanations

Examples:
    >>> from helmvm.utils.error_formatter import ErrorFormatter
    >>> from helmvm.services.backend import ReleaseNotFoundError
    >>> ErrorFormatter.format_service_error(ReleaseNotFoundError("prod", "web"))
    {'message': 'Release prod/web was not found', 'success': False}
"""

# Standard
import logging
from typing import Any, Dict

# Third-Party
from pydantic import ValidationError

# First-Party
from helmvm.services.backend import BackendUnavailableError, RegistryMappingNotFoundError, ReleaseBackendError, ReleaseNotFoundError
from helmvm.services.registry_store import RegistryStoreError
from helmvm.services.release_service import ReleaseReferenceError
from helmvm.services.values_session import ValuesSessionError

logger = logging.getLogger(__name__)


class ErrorFormatter:
    """Transform technical errors into user-friendly messages.

    Examples:
        >>> formatter = ErrorFormatter()
        >>> isinstance(formatter, ErrorFormatter)
        True
    """

    @staticmethod
    def format_validation_error(error: ValidationError) -> Dict[str, Any]:
        """Convert Pydantic errors to user-friendly format.

        Args:
            error (ValidationError): The Pydantic validation error to format

        Returns:
            Dict[str, Any]: A dictionary with formatted error details containing:
                - message: General error description, from the last failing field
                - details: List of field-specific errors
                - success: Always False for errors

        Examples:
            >>> from helmvm.schemas import RollbackRequest
            >>> try:
            ...     RollbackRequest(revision=0)
            ... except ValidationError as e:
            ...     result = ErrorFormatter.format_validation_error(e)
            >>> result['message']
            'Validation failed: Revision must be a positive integer'
            >>> result['details']
            [{'field': 'revision', 'message': 'Revision must be a positive integer'}]
            >>> result['success']
            False
        """
        errors = []
        user_message = "Invalid request"

        for err in error.errors():
            loc = err.get("loc", ["field"])
            field = str(loc[-1]) if loc else "field"
            msg = err.get("msg", "Invalid value")

            user_message = ErrorFormatter._get_user_message(field, msg)
            errors.append({"field": field, "message": user_message})

        # Log the full error for debugging
        logger.debug(f"Validation error: {error}")

        return {"message": f"Validation failed: {user_message}", "details": errors, "success": False}

    @staticmethod
    def _get_user_message(field: str, technical_msg: str) -> str:
        """Map technical validation messages to user-friendly ones.

        Args:
            field (str): The field name that failed validation
            technical_msg (str): The technical validation message from Pydantic

        Returns:
            str: User-friendly error message with field context

        Examples:
            >>> ErrorFormatter._get_user_message("chartVersion", "Value error, chartVersion is required")
            'Chart version is required'
            >>> ErrorFormatter._get_user_message("registry", "Value error, registry is required")
            'Registry is required'
            >>> ErrorFormatter._get_user_message("url", "Value error, url must be a valid HTTP or HTTPS URL")
            'Url must be a valid HTTP or HTTPS URL'
            >>> ErrorFormatter._get_user_message("values", "Input should be a valid dictionary")
            'Values must be a mapping'
            >>> ErrorFormatter._get_user_message("name", "Field required")
            'Name is required'
            >>> ErrorFormatter._get_user_message("custom_field", "Some unknown error")
            'Invalid custom_field'
        """
        label = "Chart version" if field in ("chartVersion", "chart_version") else field.replace("_", " ").capitalize()
        mappings = {
            "is required": f"{label} is required",
            "Field required": f"{label} is required",
            "revision must be a positive integer": f"{label} must be a positive integer",
            "must be a valid HTTP or HTTPS URL": f"{label} must be a valid HTTP or HTTPS URL",
            "Input should be a valid dictionary": f"{label} must be a mapping",
            "Input should be a valid integer": f"{label} must be a whole number",
        }

        for pattern, friendly_msg in mappings.items():
            if pattern in technical_msg:
                return friendly_msg

        # Default fallback
        return f"Invalid {field}"

    @staticmethod
    def format_service_error(error: Exception) -> Dict[str, Any]:
        """Convert backend and values editor errors to user-friendly format.

        Args:
            error (Exception): The error raised by a service call

        Returns:
            Dict[str, Any]: A dictionary with ``message`` and ``success``

        Examples:
            >>> from helmvm.services.backend import BackendUnavailableError, RegistryMappingNotFoundError
            >>> ErrorFormatter.format_service_error(RegistryMappingNotFoundError("prod", "web"))['message']
            'No registry is configured for prod/web'
            >>> ErrorFormatter.format_service_error(BackendUnavailableError("connection refused"))['message']
            'The release backend is unavailable, try again later'
            >>> from helmvm.services.release_service import ReleaseReferenceError
            >>> ErrorFormatter.format_service_error(ReleaseReferenceError())['message']
            'Namespace and name are required'
            >>> ErrorFormatter.format_service_error(RuntimeError("boom"))['message']
            'An unexpected error occurred'
        """
        logger.debug(f"Service error: {error!r}")

        if isinstance(error, ReleaseNotFoundError):
            message = f"Release {error.namespace}/{error.name} was not found"
        elif isinstance(error, RegistryMappingNotFoundError):
            message = f"No registry is configured for {error.namespace}/{error.name}"
        elif isinstance(error, ReleaseReferenceError):
            message = "Namespace and name are required"
        elif isinstance(error, BackendUnavailableError):
            message = "The release backend is unavailable, try again later"
        elif isinstance(error, (ReleaseBackendError, ValuesSessionError)):
            message = str(error)
        elif isinstance(error, RegistryStoreError):
            message = "Stored registry mappings are unreadable"
        else:
            logger.error(f"Unexpected service error: {error!r}")
            message = "An unexpected error occurred"

        return {"message": message, "success": False}
