"""HTTP entry point for the website audit service."""

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from orchestrator.context_store import AuditRequest
from orchestrator.orchestrator import Orchestrator
from storage import SQLRecordStore
from utils.config import AuditConfig, load_env_file
from utils.errors import ConfigError, InputError, PersistenceError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class AuditRequestBody(BaseModel):
    website_url: Optional[str] = None
    social_url: Optional[str] = None
    email: Optional[str] = None


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body: Dict[str, Any] = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


def build_default_orchestrator() -> Orchestrator:
    load_env_file()
    config = AuditConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return Orchestrator(config, SQLRecordStore(config.database_url))


def create_app(orchestrator: Optional[Orchestrator] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Tests pass an orchestrator wired to fakes; otherwise one is built from
    the environment on first use.
    """
    app = FastAPI(title="Website Audit API", version="1.0.0")
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_orchestrator() -> Orchestrator:
        if app.state.orchestrator is None:
            app.state.orchestrator = build_default_orchestrator()
        return app.state.orchestrator

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request body", str(exc.errors()))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.options("/website-audit")
    async def website_audit_preflight():
        return Response(status_code=200, headers=CORS_HEADERS)

    @app.post("/website-audit")
    async def website_audit(body: AuditRequestBody):
        request = AuditRequest(
            website_url=body.website_url,
            social_url=body.social_url or None,
            email=body.email or None,
        )
        try:
            request.normalized_url()
        except InputError as e:
            return error_response(400, str(e), e.details or None)

        try:
            result = await get_orchestrator().run_audit(request)
        except InputError as e:
            return error_response(400, str(e), e.details or None)
        except ConfigError as e:
            logger.error("Server configuration error: %s", e)
            return error_response(500, "Server configuration error", str(e))
        except PersistenceError as e:
            logger.error("Database insert error: %s", e)
            return error_response(500, "Failed to create audit record", str(e))
        except Exception as e:
            logger.exception("Error in website-audit request")
            return error_response(500, "Internal server error", str(e))

        return JSONResponse(
            content={
                "id": result.id,
                "overallScore": result.report.overall_score,
                "auditResults": result.report.to_dict(),
                "website_url": result.report.website_url,
                "status": result.status,
            },
            headers=CORS_HEADERS,
        )

    @app.get("/website-audit/{audit_id}")
    async def get_audit(audit_id: str):
        try:
            record = await asyncio.to_thread(get_orchestrator().store.get, audit_id)
        except ConfigError as e:
            logger.error("Server configuration error: %s", e)
            return error_response(500, "Server configuration error", str(e))
        except PersistenceError as e:
            return error_response(500, "Failed to read audit record", str(e))
        if record is None:
            return error_response(404, "Audit not found")
        return JSONResponse(content=record, headers=CORS_HEADERS)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.server:app", host="0.0.0.0", port=8000)
