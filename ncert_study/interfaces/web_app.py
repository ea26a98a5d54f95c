"""
Web App - FastAPI interface for the NCERT Study Library.

Endpoints:
    GET  /chapters   Resolve a book and list its chapters
    GET  /options    Every class -> subject -> book combination
    GET  /pdf-proxy  Serve an NCERT chapter PDF (disk cached)
    POST /summary    Generate a study summary for a prompt
    GET  /health     Liveness plus which catalog is answering

Run with:
    python -m ncert_study serve
"""

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from ncert_study import __version__
from ncert_study.catalog.models import BookQuery
from ncert_study.catalog.resolver import CatalogResolver
from ncert_study.config import ALLOWED_PDF_HOSTS, PDF_PROXY_MAX_AGE
from ncert_study.errors import (
    FetchError,
    ForbiddenError,
    GenerationError,
    NCERTError,
    NotConfiguredError,
    NotFoundError,
    ParseError,
    UpstreamTimeoutError,
    ValidationError,
)
from ncert_study.ingestion.fetcher import Fetcher
from ncert_study.ingestion.pdf_cache import PdfCache
from ncert_study.logger import get_logger
from ncert_study.study.pipeline import TopicTextPipeline
from ncert_study.study.summary import StudySummarizer

logger = get_logger(__name__)


class SummaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., min_length=1)
    class_name: str | int = Field(..., alias="class")
    subject: str | None = None
    chapter: str | None = None


def is_allowed_pdf_host(hostname: str | None) -> bool:
    """True for ncert.nic.in and its subdomains."""
    if not hostname:
        return False
    hostname = hostname.lower()
    return any(hostname == host or hostname.endswith(f".{host}") for host in ALLOWED_PDF_HOSTS)


def validate_pdf_url(url: str | None) -> str:
    """
    Check a /pdf-proxy target.

    Raises:
        ValidationError: Missing or malformed URL (400)
        ForbiddenError: Host outside the allowlist (403)
    """
    if not url:
        raise ValidationError("PDF URL is required")
    # Parse the way the fetcher will, so anything it would reject is a 400 here
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValidationError(f"Invalid URL format: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValidationError("Invalid URL format")
    if not is_allowed_pdf_host(parsed.host):
        raise ForbiddenError("Only NCERT PDFs are allowed")
    return url


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    resolver: CatalogResolver | None = None,
    cache: PdfCache | None = None,
    fetcher: Fetcher | None = None,
    summarizer: StudySummarizer | None = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Every collaborator can be injected; missing ones are built from config.
    The summarizer (and its Ollama client) is created on first use.
    """
    resolver = resolver or CatalogResolver.from_config()
    cache = cache or PdfCache()
    fetcher = fetcher or Fetcher()
    state = {"summarizer": summarizer}

    def get_summarizer() -> StudySummarizer:
        if state["summarizer"] is None:
            pipeline = TopicTextPipeline(resolver, cache, fetcher)
            state["summarizer"] = StudySummarizer(pipeline, resolver)
        return state["summarizer"]

    app = FastAPI(
        title="NCERT Study Library",
        description="NCERT textbook catalog, PDF proxy and study summaries",
        version=__version__,
    )

    # ── Error mapping ────────────────────────────────────────────────────

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError):
        return _error(400, str(exc))

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return _error(403, str(exc))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(NotConfiguredError)
    async def handle_not_configured(request: Request, exc: NotConfiguredError):
        return _error(503, str(exc))

    @app.exception_handler(FetchError)
    async def handle_fetch(request: Request, exc: FetchError):
        if isinstance(exc, UpstreamTimeoutError):
            return _error(504, "Request timeout - PDF took too long to load")
        if exc.status_code is not None:
            return _error(exc.status_code, f"Failed to fetch PDF ({exc.status_code})")
        return _error(502, "Failed to reach the NCERT server")

    @app.exception_handler(ParseError)
    async def handle_not_a_pdf(request: Request, exc: ParseError):
        logger.warning("Upstream body rejected on %s: %s", request.url.path, exc)
        return _error(502, "Upstream did not return a PDF")

    @app.exception_handler(GenerationError)
    async def handle_generation(request: Request, exc: GenerationError):
        logger.error("Summary generation failed: %s", exc)
        return _error(500, "Failed to generate summary")

    @app.exception_handler(NCERTError)
    async def handle_library_error(request: Request, exc: NCERTError):
        logger.error("Unhandled library error on %s: %s", request.url.path, exc)
        return _error(500, str(exc))

    # ── Routes ───────────────────────────────────────────────────────────

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "catalogSource": resolver.active_source,
            "cacheDir": str(cache.directory),
        }

    @app.get("/chapters")
    def chapters(
        book_id: str | None = Query(None, alias="bookId"),
        class_name: str | None = Query(None, alias="class"),
        subject: str | None = Query(None),
        subject_group: str | None = Query(None, alias="subjectGroup"),
        subject_key: str | None = Query(None, alias="subjectKey"),
        language: str | None = Query(None),
        language_key: str | None = Query(None, alias="languageKey"),
    ):
        if not book_id and not class_name:
            raise ValidationError("Missing required parameters: provide bookId or class")

        query = BookQuery(
            book_id=book_id,
            class_name=class_name,
            subject=subject,
            subject_group=subject_group,
            subject_key=subject_key,
            language=language,
            language_key=language_key,
        )
        result = resolver.resolve_book(query)
        if result is None:
            raise NotFoundError("No NCERT book found for the provided parameters")
        return result.to_dict()

    @app.get("/options")
    def options():
        return resolver.get_library_options().to_dict()

    @app.get("/pdf-proxy")
    def pdf_proxy(url: str | None = Query(None)):
        pdf_url = validate_pdf_url(url)
        data = cache.get_or_fetch(pdf_url, fetcher)
        return Response(
            content=data,
            media_type="application/pdf",
            headers={
                "Content-Disposition": 'inline; filename="document.pdf"',
                "Cache-Control": f"public, max-age={PDF_PROXY_MAX_AGE}",
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": "GET",
            },
        )

    @app.post("/summary")
    def summary(request: SummaryRequest):
        result = get_summarizer().summarize(
            prompt=request.prompt,
            class_name=str(request.class_name),
            subject=request.subject,
            chapter=request.chapter,
        )
        return result.to_dict()

    return app
