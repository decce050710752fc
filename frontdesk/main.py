from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from frontdesk.api.routes import router as api_router
from frontdesk.core.config import get_settings
from frontdesk.core.logging import setup_logging
from frontdesk.services.db import init_db

settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title="Hospital Front Desk", version="0.1.0")

app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error for {method} {path}", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"status": "error", "message": str(exc)})


@app.on_event("startup")
async def on_startup() -> None:
    init_db()
