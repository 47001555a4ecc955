from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from core.config import settings
from domain.colors import resolve_color
from domain.errors import (
    ConversionFailedError,
    DomainError,
    InvalidSizeError,
    LogoNotFoundError,
    MalformedInputError,
    UnsupportedFormatError,
)
from domain.sizes import STANDARD_SIZES, is_valid_size, parse_size_from_filename, parse_size_param
from infra.cache.rate_limit import MemoryCounterStore, RateLimiter, RedisCounterStore, client_identifier
from infra.cache.redis import make_redis_client
from infra.storage.logo_store import LogoStore
from services.analytics import Analytics
from services.conversion.pipeline import (
    SUPPORTED_FORMATS,
    ConversionRequest,
    convert_async,
    normalize_format,
    shutdown_executor,
)
from .schemas import (
    APIResponse,
    HealthResponse,
    ListCapabilities,
    LogoCapabilities,
    LogoDetail,
    LogoListResponse,
    LogoSummary,
    LogoVersion,
    RasterFormat,
    SizedURL,
    VersionFormats,
)


API_VERSION = "0.1.0"

ERROR_STATUS: dict[type[DomainError], int] = {
    InvalidSizeError: 400,
    UnsupportedFormatError: 400,
    LogoNotFoundError: 404,
    MalformedInputError: 422,
    ConversionFailedError: 500,
}


def error_status(exc: DomainError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]  # type: ignore[index]
    return 400


def _base_url(request: Request) -> str:
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme
    host = request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"


def _has_color_customization(metadata: dict) -> bool:
    colors = metadata.get("colors")
    if isinstance(colors, dict):
        return bool(colors.get("primary"))
    return bool(colors)


def _version_formats(base: str, version: str) -> VersionFormats:
    def raster(ext: str) -> RasterFormat:
        return RasterFormat(
            sizes=[
                SizedURL(size=s, max_dimension=s, url=f"{base}?file={version}-{s}.{ext}")
                for s in STANDARD_SIZES
            ],
            dynamic=f"{base}?file={version}.{ext}&size={{size}}",
        )

    return VersionFormats(svg={"url": f"{base}?file={version}.svg"}, png=raster("png"), webp=raster("webp"))


def _matches_search(metadata: dict, search: str) -> bool:
    needle = search.lower()
    for key in ("name", "title", "category"):
        value = metadata.get(key)
        if isinstance(value, str) and needle in value.lower():
            return True
    return any(isinstance(t, str) and needle in t.lower() for t in metadata.get("tags") or [])


def create_app(
    store: LogoStore | None = None,
    limiter: RateLimiter | None = None,
    analytics: Analytics | None = None,
) -> FastAPI:
    log = structlog.get_logger("api")
    store = store or LogoStore()
    analytics = analytics or Analytics()
    redis_client = None
    if limiter is None:
        redis_client = make_redis_client()
        counter_store = RedisCounterStore(redis_client) if redis_client else MemoryCounterStore()
        limiter = RateLimiter(counter_store, limit=settings.rate_limit_per_hour)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        shutdown_executor()
        if redis_client is not None:
            await redis_client.aclose()

    app = FastAPI(title="LogoHub API", version=API_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins.split(","),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        trace_id = uuid.uuid4().hex[:12]
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        started = time.perf_counter()
        log.info("request_start", method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
            if request.url.path.startswith("/api/v1"):
                identifier = client_identifier(
                    request.headers.get("authorization"),
                    request.headers.get("x-forwarded-for"),
                    request.client.host if request.client else None,
                )
                try:
                    state = await limiter.check(identifier)
                except Exception as exc:
                    # Counters are advisory; serve the response without headers
                    log.warning("rate_limit_unavailable", error=str(exc))
                else:
                    if state.exceeded:
                        analytics.rate_limit(identifier, request.url.path, request.headers)
                    response.headers.update(state.headers())
            log.info(
                "request_end",
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.unbind_contextvars("trace_id")

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        status = error_status(exc)
        if status >= 500:
            log.error("request_failed", code=exc.code, error=exc.message, path=request.url.path)
        else:
            log.warning("request_rejected", code=exc.code, error=exc.message, path=request.url.path)
        analytics.error(exc, endpoint=request.url.path, status_code=status)
        body = APIResponse(ok=False, error={"code": exc.code, "message": exc.message})
        return JSONResponse(status_code=status, content=body.model_dump())

    def _health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=API_VERSION,
        )

    app.get("/health", response_model=HealthResponse)(_health)
    app.get("/api/health", response_model=HealthResponse)(_health)

    async def serve_file(
        request: Request,
        logo_id: str,
        file: str,
        size: str | None,
        color: str | None,
    ) -> Response:
        name, dot, ext = file.rpartition(".")
        if not dot or not name or not ext:
            raise UnsupportedFormatError(
                f"Invalid file '{file}'. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
            )
        fmt = normalize_format(ext)

        dimension: int | None = None
        if size is not None:
            dimension = parse_size_param(size)
            if dimension is None or not is_valid_size(dimension):
                raise InvalidSizeError(
                    f"Invalid size '{size}'. Must be between 1 and {settings.max_image_size} pixels"
                )
        elif fmt != "svg":
            dimension = parse_size_from_filename(file)
            if dimension is not None and not is_valid_size(dimension):
                raise InvalidSizeError(
                    f"Invalid size {dimension} in '{file}'. Must be between 1 and {settings.max_image_size} pixels"
                )
        if fmt != "svg" and dimension is None:
            dimension = settings.default_image_size

        color_spec = resolve_color(color)
        source = store.read_svg(logo_id, name)
        analytics.logo_view(logo_id, request.headers, format=fmt, size=dimension, color=color, variant=name)

        started = time.perf_counter()
        result = await convert_async(
            ConversionRequest(
                source_bytes=source,
                target_format=fmt,
                target_max_dimension=dimension if fmt != "svg" else None,
                color=color_spec,
            )
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.info("logo_converted", logo_id=logo_id, format=fmt, size=dimension, bytes=len(result.bytes), duration_ms=round(elapsed_ms, 2))
        analytics.logo_download(
            logo_id,
            format=fmt,
            size=dimension,
            color=color_spec.hex if color_spec else None,
            file_size=len(result.bytes),
            conversion_ms=elapsed_ms,
        )
        return Response(
            content=result.bytes,
            media_type=result.content_type,
            headers={"Cache-Control": f"public, max-age={settings.cache_max_age}"},
        )

    @app.get("/api/v1/logos")
    async def list_logos(
        request: Request,
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1),
        search: str | None = None,
        industry: str | None = None,
        format: str | None = None,
    ) -> Response:
        limit = min(limit, 100)
        analytics.api_call(
            "/api/v1/logos",
            request.method,
            request.headers,
            request.query_params,
            has_filters=bool(industry or format),
        )
        base = _base_url(request)

        summaries: list[LogoSummary] = []
        for logo_id in store.list_ids():
            try:
                metadata = store.read_metadata(logo_id)
                versions = store.versions(logo_id)
            except DomainError as exc:
                log.warning("logo_skipped", logo_id=logo_id, error=exc.message)
                continue
            if search and not _matches_search(metadata, search):
                continue
            if industry and metadata.get("category") != industry:
                continue
            if format and format not in SUPPORTED_FORMATS:
                continue
            tags = metadata.get("tags") or []
            summaries.append(
                LogoSummary(
                    id=logo_id,
                    name=metadata.get("name"),
                    title=metadata.get("title"),
                    category=metadata.get("category"),
                    tags=[t for t in tags if isinstance(t, str)],
                    versions=versions,
                    formats=list(SUPPORTED_FORMATS),
                    color_customization=_has_color_customization(metadata),
                    url=f"{base}/api/v1/logos/{logo_id}",
                )
            )

        if search:
            analytics.search(search, request.headers, results_count=len(summaries), filters={"industry": industry, "format": format})

        start = (page - 1) * limit
        body = LogoListResponse(
            total=len(summaries),
            page=page,
            limit=limit,
            logos=summaries[start:start + limit],
            categories=sorted({s.category for s in summaries if s.category}),
            capabilities=ListCapabilities(formats=list(SUPPORTED_FORMATS), standard_sizes=list(STANDARD_SIZES)),
        )
        if not summaries:
            body.message = (
                f'No logos found for "{search}". Try a different search term.'
                if search
                else "No logos found. Add logos to the logos directory to get started!"
            )
        return JSONResponse(
            content=body.model_dump(by_alias=True, exclude_none=True),
            headers={"Cache-Control": f"public, max-age={settings.list_cache_max_age}"},
        )

    @app.get("/api/v1/logos/{logo_id}")
    async def get_logo(
        request: Request,
        logo_id: str,
        file: str | None = None,
        size: str | None = None,
        color: str | None = None,
    ) -> Response:
        analytics.api_call(
            f"/api/v1/logos/{logo_id}",
            request.method,
            request.headers,
            request.query_params,
            has_file=bool(file),
            has_color_customization=bool(color),
            has_size_customization=bool(size),
        )
        if file:
            return await serve_file(request, logo_id, file, size, color)

        metadata = store.read_metadata(logo_id)
        analytics.logo_view(logo_id, request.headers, format="metadata")
        base = f"{_base_url(request)}/api/v1/logos/{logo_id}"
        detail = LogoDetail(
            id=logo_id,
            name=metadata.get("name"),
            title=metadata.get("title"),
            website=metadata.get("website"),
            colors=metadata.get("colors"),
            versions=[LogoVersion(name=v, formats=_version_formats(base, v)) for v in store.versions(logo_id)],
            capabilities=LogoCapabilities(
                color_customization=_has_color_customization(metadata),
                formats=list(SUPPORTED_FORMATS),
                standard_sizes=list(STANDARD_SIZES),
            ),
        )
        return JSONResponse(
            content=detail.model_dump(by_alias=True),
            headers={"Cache-Control": f"public, max-age={settings.metadata_cache_max_age}"},
        )

    @app.get("/api/v1/logos/{logo_id}/{file}")
    async def get_logo_file(
        request: Request,
        logo_id: str,
        file: str,
        size: str | None = None,
        color: str | None = None,
    ) -> Response:
        return await serve_file(request, logo_id, file, size, color)

    @app.get("/api/logo/{logo_id}")
    async def legacy_logo(
        request: Request,
        logo_id: str,
        format: str = "svg",
        size: str | None = None,
        color: str | None = None,
    ) -> Response:
        fmt = normalize_format(format)
        return await serve_file(request, logo_id, f"{logo_id}.{fmt}", size, color)

    return app


app = create_app()
