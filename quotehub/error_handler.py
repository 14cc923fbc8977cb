"""Error payload helpers for the HTTP surface."""
from typing import Any, Dict
import logging

from quotehub.integrations.errors import QuoteError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_quote_error(self, exc: QuoteError) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": False,
            "message": exc.message,
            "error_type": exc.error_type,
        }
        if exc.payload:
            body["details"] = exc.payload
        return body

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception while serving request: %s", exc, exc_info=True)
        return {
            "success": False,
            "message": "An internal error occurred while processing your request. Please try again later.",
            "error_type": "internal_error",
            "metadata": {"error": type(exc).__name__, "context": context or {}},
        }
