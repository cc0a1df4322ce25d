"""Referral assistant service entry point."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import settings
from .exception_handlers import (
    generic_exception_handler,
    http_exception_handler,
    llm_unavailable_handler,
    validation_exception_handler,
)
from .llm.client import LLMUnavailableError
from .middleware import PrometheusMiddleware
from .routes import chat, masking, metrics, terms
from .schemas import HealthResponse
from .terms.loader import term_list_loader


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the clinical term fetch without waiting for it."""
    # Requests served before the fetch resolves are masked without protection
    load_task = asyncio.create_task(term_list_loader.load())
    app.state.term_load_task = load_task
    yield
    if not load_task.done():
        load_task.cancel()


app = FastAPI(
    title="Nephrology Referral Assistant",
    version=__version__,
    description="Referral drafting assistant with clinical-text PII masking",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)
app.add_middleware(PrometheusMiddleware)

app.include_router(terms.router, prefix="/api", tags=["terms"])
app.include_router(masking.router, prefix="/api", tags=["masking"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(metrics.router, tags=["metrics"])

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(LLMUnavailableError, llm_unavailable_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/api/health")
async def health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service="referral-assistant",
        version=__version__,
        terms_loaded=term_list_loader.loaded,
        term_count=len(term_list_loader.terms),
    )
