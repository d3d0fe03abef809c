"""
HTTP service for MockEm.

Endpoints:
- GET  /session       issue or fetch a session (sets the session cookie)
- GET  /session/info  quota counters for the caller's session
- POST /generate      generate related rows with a 10-row preview
- POST /export        CSV (one schema) or base64 bundle (several)
- POST /waitlist      register interest in API access
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Type

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mockem.api.schemas import GenerateBody, WaitlistBody
from mockem.catalog import load_catalog, load_vocabularies
from mockem.config import ServiceConfig, load_config
from mockem.errors import (
    ConfigError,
    MockemError,
    QuotaExceededError,
    UnauthenticatedError,
    ValidationError,
)
from mockem.generator import Generator
from mockem.log import setup_logging
from mockem.models import GenerationRequest
from mockem.output import ExportWriter
from mockem.store import SessionStore, UsageDelta, WaitlistStore

logger = logging.getLogger(__name__)

# Most specific first
_ERROR_STATUS: Tuple[Tuple[Type[MockemError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (QuotaExceededError, status.HTTP_429_TOO_MANY_REQUESTS),
    (ConfigError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def _status_for(exc: MockemError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _build_error_response(exc: MockemError) -> Dict[str, Any]:
    return {"error": {"code": exc.code, "message": exc.message}}


def create_app(
    config: Optional[ServiceConfig] = None,
    sessions: Optional[SessionStore] = None,
    waitlist: Optional[WaitlistStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Catalog and vocabularies are loaded (and validated) here, once.
    """
    config = config or load_config()
    setup_logging(config.log_level)
    catalog = load_catalog(config.catalog_path)
    vocabularies = load_vocabularies(config.vocabularies_path)
    sessions = sessions or SessionStore(limits=config.quota, ttl=config.session_ttl)
    waitlist = waitlist or WaitlistStore()

    app = FastAPI(title="MockEm", description="Enterprise mock data generator")
    app.state.config = config
    app.state.catalog = catalog
    app.state.sessions = sessions
    app.state.waitlist = waitlist

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MockemError)
    async def mockem_error_handler(request: Request, exc: MockemError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=status_code, content=_build_error_response(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
        error = ValidationError(f"Invalid request body: {', '.join(fields) or 'body'}")
        logger.info(f"{request.method} {request.url.path} rejected: {error.message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_error_response(error),
        )

    def _require_session(request: Request) -> str:
        session_id = request.cookies.get(config.cookie_name)
        if not session_id:
            raise UnauthenticatedError()
        return session_id

    def _generator(request: GenerationRequest) -> Generator:
        return Generator(catalog, request, vocabularies)

    @app.get("/session")
    def get_session(request: Request, response: Response) -> Dict[str, Any]:
        """Return the caller's live session or create a new one."""
        record = sessions.get(request.cookies.get(config.cookie_name))
        if record is None:
            record = sessions.create()
            response.set_cookie(
                key=config.cookie_name,
                value=record.session_id,
                max_age=int(config.session_ttl.total_seconds()),
                expires=sessions.expires_at(record),
                httponly=True,
                secure=config.cookie_secure,
                samesite=config.cookie_samesite,
            )
        return {
            "sessionInfo": {
                "sessionId": record.session_id,
                "limits": record.usage.to_dict(),
            }
        }

    @app.get("/session/info")
    def get_session_info(request: Request) -> Dict[str, Any]:
        """Quota counters for the caller's cookie, zeroed when absent or expired."""
        session_id = request.cookies.get(config.cookie_name)
        record = sessions.get(session_id)
        return {
            "sessionId": record.session_id if record else None,
            "limits": sessions.usage(session_id).to_dict(),
            "dailyLimits": sessions.limits.to_dict(),
        }

    @app.post("/generate")
    def generate(body: GenerateBody, request: Request) -> Dict[str, Any]:
        session_id = _require_session(request)
        generator = _generator(body.to_request())

        order = generator.plan()
        delta = UsageDelta(rows=body.row_count * len(order), schemas=1)
        sessions.validate(session_id, delta)

        result = generator.generate()
        usage = sessions.apply(session_id, delta)

        return {
            "data": result.data,
            "totalRows": result.total_rows,
            "preview": result.preview(),
            "sessionLimits": usage.to_dict(),
            "generationOrder": result.order,
            "unresolvedReferences": result.unresolved_references,
        }

    @app.post("/export")
    def export(body: GenerateBody, request: Request) -> Dict[str, Any]:
        session_id = _require_session(request)
        generator = _generator(body.to_request())

        generator.plan()
        delta = UsageDelta(exports=1)
        sessions.validate(session_id, delta)

        payload = ExportWriter(generator.generate()).export()
        sessions.apply(session_id, delta)

        logger.info(f"Exported {payload.filename}")
        return payload.to_dict()

    @app.post("/waitlist")
    def join_waitlist(body: WaitlistBody) -> Dict[str, Any]:
        success, message = waitlist.join(body.email, body.company, body.use_case)
        return {"success": success, "message": message}

    return app
