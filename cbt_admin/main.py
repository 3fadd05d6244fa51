# -*- coding: utf-8 -*-
"""
Entry point of the CBT admin BFF.
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cbt_admin import __version__
from cbt_admin.api.v1 import router as cms_router
from cbt_admin.config.logger import configure_logger, get_system_logger
from cbt_admin.config.settings import settings
from cbt_admin.config.uvicorn_config import setup_uvicorn_logging
from cbt_admin.utils.exceptions import APIException

logger = configure_logger()

app = FastAPI(
    title="CBT Admin",
    description="Backend-for-frontend of the CBT exam platform admin",
    version=__version__,
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    openapi_tags=[
        {"name": "🧭 Navigasi", "description": "Menu berdasarkan role"},
        {"name": "📚 Bank Soal", "description": "Daftar soal, import dan export"},
        {"name": "📎 Upload", "description": "Upload media untuk editor soal"},
        {"name": "🧪 Ujian Online", "description": "Daftar ujian dan export PDF"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_all_requests(request: Request, call_next):
    if request.url.path.startswith("/api/"):
        logger.info(f"🌐 API request: {request.method} {request.url.path}")

    response = await call_next(request)

    if request.url.path.startswith("/api/"):
        if response.status_code >= 400:
            logger.warning(
                f"❌ API error: {request.method} {request.url.path} → {response.status_code}"
            )
        else:
            logger.info(
                f"✅ API response: {request.method} {request.url.path} → {response.status_code}"
            )
    return response


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
        headers=exc.headers,
    )


app.include_router(cms_router, prefix="/api/v1/cms")


@app.on_event("startup")
async def startup_event():
    setup_uvicorn_logging()
    system_logger = get_system_logger()
    system_logger.info(f"🚀 CBT Admin {__version__}")
    system_logger.info(f"🔧 Config: {settings.get_config_source()}")
    system_logger.info(f"🌍 Remote API: {settings.api_base_url}")


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


def run():
    uvicorn.run(
        "cbt_admin.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
