import logging
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blueprint.api.llm import router as llm_router
from blueprint.core.config import get_settings
from blueprint.services.planning.error_policy import build_http_error_payload, build_unexpected_error_payload


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Blueprint API",
    version="0.1.0",
    description="Project planning suggestions backed by structured LLM output",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok", "env": settings.env}


@app.exception_handler(HTTPException)
async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    trace_id = request.headers.get("x-trace-id") or uuid4().hex
    payload = build_http_error_payload(exc, trace_id)
    if exc.status_code >= 500:
        logger.warning(
            "request failed trace_id=%s path=%s code=%s",
            trace_id,
            request.url.path,
            payload["error_code"],
        )
    return JSONResponse(status_code=exc.status_code, content=payload)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    trace_id = request.headers.get("x-trace-id") or uuid4().hex
    logger.error("unexpected error trace_id=%s path=%s", trace_id, request.url.path, exc_info=exc)
    payload = build_unexpected_error_payload(trace_id)
    return JSONResponse(status_code=500, content=payload)


app.include_router(llm_router)
