"""Structured logger for observability."""

import logging
from typing import Any, Optional

# Configure root logger with key=value structured format
_logger = logging.getLogger("car_catalog_search")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(component: str, level: int = logging.INFO, **kwargs: Any) -> None:
    """
    Log a structured event.

    Args:
        component: Component name (e.g., 'http', 'search', 'llm_fallback')
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {"component": component}
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


def log_request(request_id: str, method: str, path: str, **kwargs: Any) -> None:
    """
    Log an incoming HTTP request.

    Args:
        request_id: Request correlation id
        method: HTTP method
        path: Request path
        **kwargs: Additional fields
    """
    log_event("http", request_id=request_id, method=method, path=path, **kwargs)


def log_search(
    request_id: str,
    filters: dict[str, Any],
    total: int,
    page: Optional[int] = None,
    **kwargs: Any,
) -> None:
    """
    Log a structured search.

    Args:
        request_id: Request correlation id
        filters: Canonical filter applied
        total: Number of matching listings
        page: Requested page
        **kwargs: Additional fields
    """
    fields: dict[str, Any] = {"search_filters": filters, "search_total": total}
    if page is not None:
        fields["search_page"] = page
    fields.update(kwargs)
    log_event("search", request_id=request_id, **fields)


def log_query_parsed(
    request_id: str,
    source: str,
    confidence: float,
    filters: dict[str, Any],
    **kwargs: Any,
) -> None:
    """
    Log the outcome of natural-language parsing.

    Args:
        request_id: Request correlation id
        source: 'llm' or 'fallback'
        confidence: Parser confidence
        filters: Extracted filter
        **kwargs: Additional fields
    """
    log_event(
        "nl_parser",
        request_id=request_id,
        parser_source=source,
        parser_confidence=confidence,
        parsed_filters=filters,
        **kwargs,
    )


def log_recommendation(
    request_id: str,
    recommendations_count: int,
    alternatives_count: int,
    **kwargs: Any,
) -> None:
    """
    Log recommendation output.

    Args:
        request_id: Request correlation id
        recommendations_count: Number of recommendations
        alternatives_count: Number of alternatives
        **kwargs: Additional fields
    """
    log_event(
        "recommendation",
        request_id=request_id,
        recommendations_count=recommendations_count,
        alternatives_count=alternatives_count,
        **kwargs,
    )


logger = _logger
