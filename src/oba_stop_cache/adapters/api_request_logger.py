"""Opt-in logging of outgoing API requests, enabled by OBA_LOG_REQUESTS."""

import logging
import os
from typing import Any
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"
SENSITIVE_PARAMS = frozenset({"key", "api_key", "apikey"})
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})


def should_log_requests() -> bool:
    """Check if request logging is enabled via the OBA_LOG_REQUESTS environment variable."""
    return os.getenv("OBA_LOG_REQUESTS", "").lower() == "true"


def redact_params(params: dict[str, Any]) -> dict[str, Any]:
    """Replace the values of API key parameters."""
    return {k: REDACTED if k.lower() in SENSITIVE_PARAMS else v for k, v in params.items()}


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Replace the values of credential headers."""
    return {k: REDACTED if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def build_loggable_url(url: str, params: dict[str, Any] | None) -> str:
    """Build the full request URL with credentials redacted."""
    if not params:
        return url
    query = urlencode(sorted(redact_params(params).items()), safe="*")
    return f"{url}&{query}" if "?" in url else f"{url}?{query}"


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log API request details if OBA_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Request URL without query string.
        params: Query parameters; API keys are redacted.
        headers: Request headers; credentials are redacted.
    """
    if not should_log_requests():
        return

    message = f"API Request: {method} {build_loggable_url(url, params)}"
    if headers:
        message += f" headers={redact_headers(headers)}"
    logger.info(message)
