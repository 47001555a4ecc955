from __future__ import annotations

import hashlib
import re
from typing import Any, Mapping
from urllib.parse import urlparse

import structlog

from core.config import settings


log = structlog.get_logger("analytics")

API_CALL = "api_call"
LOGO_VIEW = "logo_view"
LOGO_DOWNLOAD = "logo_download"
SEARCH_QUERY = "search_query"
ERROR = "api_error"
RATE_LIMIT = "rate_limit_hit"

_QUERY_KEYS = {"page", "limit", "format", "size", "color", "industry", "category"}
_USER_AGENTS = ("Chrome", "Firefox", "Safari", "Edge", "curl", "axios", "fetch", "node")


def sanitize_user_agent(user_agent: str | None) -> str:
    ua = user_agent or ""
    for family in _USER_AGENTS:
        if family in ua:
            return family
    return "other"


def sanitize_domain(url: str | None) -> str:
    if not url or url == "direct":
        return "direct"
    host = urlparse(url).hostname
    return host or "unknown"


def sanitize_query(query: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in query.items() if k in _QUERY_KEYS}


def sanitize_search_query(query: Any) -> str:
    if not isinstance(query, str):
        return "non-string"
    return re.sub(r"[^\w\s-]", "", query[:50].lower())


def hash_identifier(identifier: str) -> str:
    return hashlib.sha256(identifier.encode("utf-8")).hexdigest()[:8]


class Analytics:
    """Usage events written as structured log records.

    Outside production events are logged at debug level only.
    """

    def __init__(self, enabled: bool | None = None) -> None:
        self.enabled = settings.app_env == "production" if enabled is None else enabled

    def track(self, event: str, **properties: Any) -> None:
        if self.enabled:
            log.info(event, **properties)
        else:
            log.debug(event, debug=True, **properties)

    def api_call(self, endpoint: str, method: str, headers: Mapping[str, str], query: Mapping[str, Any], **extra: Any) -> None:
        self.track(
            API_CALL,
            endpoint=endpoint,
            method=method,
            user_agent=sanitize_user_agent(headers.get("user-agent")),
            referer=sanitize_domain(headers.get("referer")),
            has_api_key=bool(headers.get("authorization")),
            query=sanitize_query(query),
            **extra,
        )

    def logo_view(self, logo_id: str, headers: Mapping[str, str], **extra: Any) -> None:
        self.track(
            LOGO_VIEW,
            logo_id=logo_id,
            user_agent=sanitize_user_agent(headers.get("user-agent")),
            referer=sanitize_domain(headers.get("referer")),
            **extra,
        )

    def logo_download(self, logo_id: str, *, format: str, size: int | None, color: str | None, file_size: int, conversion_ms: float) -> None:
        self.track(
            LOGO_DOWNLOAD,
            logo_id=logo_id,
            format=format,
            size=size,
            color=color,
            file_size=file_size,
            conversion_ms=round(conversion_ms, 2),
        )

    def search(self, query: str, headers: Mapping[str, str], results_count: int = 0, filters: dict | None = None) -> None:
        self.track(
            SEARCH_QUERY,
            query=sanitize_search_query(query),
            results_count=results_count,
            filters=filters or {},
            user_agent=sanitize_user_agent(headers.get("user-agent")),
        )

    def error(self, exc: BaseException, *, endpoint: str, status_code: int = 500, **context: Any) -> None:
        self.track(
            ERROR,
            error_type=type(exc).__name__,
            error_message=str(exc)[:100] or "No message",
            status_code=status_code,
            endpoint=endpoint,
            **context,
        )

    def rate_limit(self, identifier: str, endpoint: str, headers: Mapping[str, str]) -> None:
        self.track(
            RATE_LIMIT,
            identifier=hash_identifier(identifier),
            endpoint=endpoint,
            user_agent=sanitize_user_agent(headers.get("user-agent")),
        )

    def usage_stats(self) -> dict[str, Any]:
        return {
            "analytics_enabled": self.enabled,
            "environment": settings.app_env,
            "tracking_events": [API_CALL, LOGO_VIEW, LOGO_DOWNLOAD, SEARCH_QUERY, ERROR, RATE_LIMIT],
        }
