"""FastAPI application for bill quotes."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings

from .middlewares import HttpErrorCounterMiddleware, RequestIdMiddleware
from .obs import capture_exception, configure_logging, init_sentry
from .routes_bill import router as bill_router
from .routes_metrics import router as metrics_router
from .tax.gstin import InvalidGSTINError
from .tax.money import InvalidAmountError
from .utils.responses import err

settings = get_settings()
app = FastAPI(
    title="GST POS API",
    version="1.0.0",
    servers=[{"url": "/"}],
    openapi_url="/openapi.json",
)
app.add_middleware(HttpErrorCounterMiddleware)
app.add_middleware(RequestIdMiddleware)

configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger("api")
init_sentry(settings.error_dsn, env=settings.env)


@app.exception_handler(InvalidAmountError)
@app.exception_handler(InvalidGSTINError)
async def billing_error_handler(request: Request, exc: ValueError):
    logger.warning(str(exc), extra={"status": 400, "route": request.url.path})
    return JSONResponse(
        err(exc.code, str(exc), hint=exc.hint), status_code=400
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(
        exc.detail,
        extra={"status": exc.status_code, "route": request.url.path},
    )
    return JSONResponse(err(exc.status_code, exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.exception(
        "unhandled_error",
        extra={"status": 500, "route": request.url.path},
    )
    capture_exception(exc)
    return JSONResponse(err(500, "Internal Server Error"), status_code=500)


@app.get("/health")
async def health() -> dict:
    return {"ok": True}


app.include_router(bill_router)
app.include_router(metrics_router)
