"""
Honeycomb MCP Exception Handling Framework

Provides the error taxonomy shared by the Honeycomb client and the MCP tools,
with structured responses that MCP clients can render.

Features:
- Specific exception types for environment, API, polling and analysis failures
- Structured error responses with error codes and context
- Automatic logging integration for tool calls
- Recovery suggestions keyed on HTTP status codes
"""

import functools
import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class MCPErrorCode(Enum):
    """Standardized error codes for MCP operations."""

    # Input/Validation Errors (4xx equivalent)
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN_ENVIRONMENT = "UNKNOWN_ENVIRONMENT"

    # External Service Errors (5xx equivalent)
    HONEYCOMB_API_ERROR = "HONEYCOMB_API_ERROR"
    QUERY_FAILED = "QUERY_FAILED"

    # Internal Errors (5xx equivalent)
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Network/Connectivity Errors
    TIMEOUT_ERROR = "TIMEOUT_ERROR"


class MCPException(Exception):
    """Base exception class for MCP operations."""

    def __init__(
        self,
        message: str,
        error_code: MCPErrorCode,
        details: Optional[Dict[str, Any]] = None,
        recovery_suggestion: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.recovery_suggestion = recovery_suggestion
        self.original_exception = original_exception

    def to_mcp_response(self) -> List[Dict[str, Any]]:
        """Convert exception to MCP-compliant error response."""
        content = f"❌ **Error ({self.error_code.value})**\n\n{self.message}"

        if self.recovery_suggestion:
            content += f"\n\n💡 **Suggestion**: {self.recovery_suggestion}"

        if self.details:
            content += f"\n\n📋 **Details**: {json.dumps(self.details, indent=2, default=str)}"

        return [{"type": "text", "text": content}]


class ValidationError(MCPException):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None, details: Optional[Dict[str, Any]] = None):
        combined_details = details or {}
        if field:
            combined_details["field"] = field
        if value is not None:
            combined_details["provided_value"] = str(value)

        super().__init__(
            message=message,
            error_code=MCPErrorCode.INVALID_INPUT,
            details=combined_details,
            recovery_suggestion="Please check the input parameters and try again."
        )


class ConfigurationError(MCPException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {}
        if config_key:
            details["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=MCPErrorCode.CONFIGURATION_ERROR,
            details=details,
            recovery_suggestion="Check HONEYCOMB_CONFIG_PATH or HONEYCOMB_API_KEY."
        )


class UnknownEnvironment(MCPException):
    """Raised when an environment name is not registered."""

    def __init__(self, environment: str, available: Optional[List[str]] = None):
        self.environment = environment
        available = list(available or [])
        super().__init__(
            message=f"Unknown environment: {environment}",
            error_code=MCPErrorCode.UNKNOWN_ENVIRONMENT,
            details={"environment": environment, "available_environments": available},
            recovery_suggestion="Use list_environments to see the configured environment names."
        )


class APIError(MCPException):
    """Raised when the Honeycomb API answers with a non-success status."""

    def __init__(self, status_code: int, status_text: str, path: Optional[str] = None):
        self.status_code = status_code
        self.status_text = status_text
        details: Dict[str, Any] = {"http_status": status_code}
        if path:
            details["path"] = path

        if status_code == 401:
            recovery_suggestion = "Verify the environment's API key."
        elif status_code == 403:
            recovery_suggestion = "The API key lacks the permission required for this endpoint."
        elif status_code == 404:
            recovery_suggestion = "Check that the dataset, SLO or trigger exists in this environment."
        elif status_code == 422:
            recovery_suggestion = "The query body was rejected. Check calculation ops and column names."
        elif status_code == 429:
            recovery_suggestion = "Rate limit exceeded. Wait a moment and try again."
        elif status_code >= 500:
            recovery_suggestion = "Honeycomb may be unavailable. Try again later."
        else:
            recovery_suggestion = "Check the request parameters and try again."

        super().__init__(
            message=f"Honeycomb API error: {status_text}",
            error_code=MCPErrorCode.HONEYCOMB_API_ERROR,
            details=details,
            recovery_suggestion=recovery_suggestion
        )


class QueryTimeout(MCPException):
    """Raised when a query result is still incomplete after every poll."""

    def __init__(self, attempts: int, query_result_id: Optional[str] = None):
        self.attempts = attempts
        details: Dict[str, Any] = {"attempts": attempts}
        if query_result_id:
            details["query_result_id"] = query_result_id

        super().__init__(
            message="Query timed out waiting for results",
            error_code=MCPErrorCode.TIMEOUT_ERROR,
            details=details,
            recovery_suggestion="Try a shorter time range or fewer breakdowns."
        )


class AnalysisQueryFailed(MCPException):
    """Wraps any failure raised while running an analysis query."""

    def __init__(self, original: Exception):
        super().__init__(
            message=f"Analysis query failed: {_message_of(original)}",
            error_code=MCPErrorCode.QUERY_FAILED,
            details=_details_of(original),
            recovery_suggestion=getattr(original, "recovery_suggestion", None),
            original_exception=original
        )


class ColumnAnalysisFailed(MCPException):
    """Wraps any failure raised while analyzing a column."""

    def __init__(self, original: Exception):
        super().__init__(
            message=f"Column analysis failed: {_message_of(original)}",
            error_code=MCPErrorCode.QUERY_FAILED,
            details=_details_of(original),
            recovery_suggestion=getattr(original, "recovery_suggestion", None),
            original_exception=original
        )


def _message_of(error: Exception) -> str:
    if isinstance(error, MCPException):
        return error.message
    return str(error) or "Unknown error"


def _details_of(error: Exception) -> Dict[str, Any]:
    if isinstance(error, MCPException):
        return {"cause": error.error_code.value, **error.details}
    return {"cause": type(error).__name__}


def handle_mcp_exception(func):
    """Decorator to standardize exception handling for async MCP tools."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except MCPException as e:
            # Log the MCP exception with context
            logger.error(
                "MCP tool error: %s",
                e.message,
                extra={
                    "error_code": e.error_code.value,
                    "tool_name": func.__name__,
                    "details": e.details
                }
            )
            return e.to_mcp_response()
        except Exception as e:
            # Handle unexpected exceptions
            logger.exception(
                "Unexpected error in MCP tool: %s",
                func.__name__,
                extra={
                    "tool_name": func.__name__,
                    "error_type": type(e).__name__
                }
            )

            internal_error = MCPException(
                message=f"An unexpected error occurred: {str(e)}",
                error_code=MCPErrorCode.INTERNAL_ERROR,
                details={"error_type": type(e).__name__},
                recovery_suggestion="Please try again. If the problem persists, check the server logs.",
                original_exception=e
            )
            return internal_error.to_mcp_response()

    return wrapper


def validate_required_params(**params) -> None:
    """Validate that required parameters are provided and not empty."""
    for param_name, param_value in params.items():
        if param_value is None or (isinstance(param_value, str) and not param_value.strip()):
            raise ValidationError(
                message=f"Required parameter '{param_name}' is missing or empty",
                field=param_name,
                value=param_value
            )
