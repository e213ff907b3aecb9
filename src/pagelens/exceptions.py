"""
PageLens Exception Hierarchy

Exceptions are raised only inside the document adapters and the configuration
layer. Every public component (extractor, detector, locator, executor,
orchestrator) converts them into structured results at its own boundary, so
callers never see a raised fault from a page operation.

Each error carries:
1. A stable error code for programmatic handling
2. Context information (reference, URL, operation)
3. A user-facing message and an optional suggestion
"""

import time
from typing import Any, Dict, Optional


class PageLensError(Exception):
    """
    Base exception class for all pagelens errors.

    Attributes:
        error_code: Unique error code for programmatic handling
        timestamp: When the error occurred
        context: Additional context information
        user_message: User-friendly error message
        developer_message: Detailed technical error message
        suggestion: Suggested fix or next steps (if applicable)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "PAGELENS_ERROR",
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.timestamp = time.time()
        self.context = context or {}
        self.user_message = user_message or message
        self.developer_message = message
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.developer_message,
            "user_message": self.user_message,
            "timestamp": self.timestamp,
            "context": self.context,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.developer_message}"


class ConfigurationError(PageLensError):
    """Raised when a configuration mapping contains unknown or invalid values."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        self.field_name = field_name

        context = kwargs.pop("context", {})
        if field_name:
            context["field"] = field_name

        super().__init__(
            message,
            error_code="CONFIGURATION_ERROR",
            context=context,
            suggestion=kwargs.pop("suggestion", "Check the configuration keys and value types."),
            **kwargs,
        )


# =============================================================================
# DOCUMENT ERRORS
# =============================================================================

class DocumentError(PageLensError):
    """Base class for failures talking to a document context."""

    def __init__(self, message: str, **kwargs):
        # Extract error_code to avoid duplicate parameter
        error_code = kwargs.pop("error_code", "DOCUMENT_ERROR")
        super().__init__(message, error_code=error_code, **kwargs)


class DocumentNotReadyError(DocumentError):
    """
    Raised when the document did not finish loading in time.
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None, **kwargs):
        self.url = url
        self.timeout = timeout

        context = kwargs.pop("context", {})
        if url:
            context["url"] = url
        if timeout is not None:
            context["timeout"] = timeout

        message = f"Document not ready: {url}" if url else "Document not ready"
        super().__init__(
            message,
            error_code="DOCUMENT_NOT_READY_ERROR",
            context=context,
            user_message="The page has not finished loading.",
            suggestion="Wait for the page to load or increase the timeout.",
            **kwargs,
        )


class ElementNotFoundError(DocumentError):
    """
    Raised when a reference no longer resolves to a live element.

    References are only valid for immediate use; any mutation of the tree
    (a "load more" click, a re-render) can invalidate them.
    """

    def __init__(self, reference: str, **kwargs):
        self.reference = reference

        context = kwargs.pop("context", {})
        context["reference"] = reference

        super().__init__(
            f"element not found: `{reference}`",
            error_code="ELEMENT_NOT_FOUND_ERROR",
            context=context,
            user_message="The requested element is no longer on the page.",
            suggestion="Locate the element again before interacting with it.",
            **kwargs,
        )


class InteractionError(DocumentError):
    """
    Raised when an element exists but the interaction could not be performed.

    Examples:
    - Element is disabled
    - Click dispatch timed out
    - Element detached while scrolling
    """

    def __init__(self, message: str, reference: Optional[str] = None, **kwargs):
        self.reference = reference

        context = kwargs.pop("context", {})
        if reference:
            context["reference"] = reference

        super().__init__(
            message,
            error_code="INTERACTION_ERROR",
            context=context,
            user_message="The page did not accept the interaction.",
            **kwargs,
        )


class ActionParseError(PageLensError):
    """Raised when an action pattern table is malformed."""

    def __init__(self, message: str, pattern_name: Optional[str] = None, **kwargs):
        self.pattern_name = pattern_name

        context = kwargs.pop("context", {})
        if pattern_name:
            context["pattern"] = pattern_name

        super().__init__(
            message,
            error_code="ACTION_PARSE_ERROR",
            context=context,
            **kwargs,
        )
