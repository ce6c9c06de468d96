"""
Main FastAPI Application
=======================

Entry point for the neomap API server.
"""

import logging
import sys
import time

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.router import api_router
from .services.logging_service import init_logging
from .services.map_session import close_map_session


class ColoredFormatter(logging.Formatter):
    """Console formatter with colors and emojis per level"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m'
    }

    EMOJIS = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️',
        'WARNING': '⚠️',
        'ERROR': '❌',
        'CRITICAL': '🚨'
    }

    def format(self, record):
        emoji = self.EMOJIS.get(record.levelname, '')
        color = self.COLORS.get(record.levelname, '')
        reset = self.COLORS['RESET']
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{emoji} {record.levelname}{reset}"
        return super().format(record)


def setup_logging():
    """Console logging with visual indicators"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter("%(levelname)s %(name)s: %(message)s"))

    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)


setup_logging()
try:
    init_logging()
except OSError as e:
    # read-only deployments still get console + ring buffer logging
    logging.getLogger(__name__).warning(f"⚠️ File logging unavailable: {e}")
    init_logging(log_file=False)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="neomap API",
    description="Graph query results on a geographic map, with drawn-shape geo filters",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Starting neomap API Server")


@app.on_event("shutdown")
async def shutdown_event():
    """Close the graph database driver"""
    logger.info("🛑 Shutting down neomap API Server")
    close_map_session()
    logger.info("✅ neomap API Server shutdown complete")


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = str(time.time() - start_time)
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if app.debug else "An unexpected error occurred"
        }
    )


@app.get("/")
async def root():
    return {
        "message": "neomap API v1.0",
        "status": "running",
        "docs": "/docs",
    }


def run():
    uvicorn.run("neomap.main:app", host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    logger.info("🔧 Starting neomap API Server in development mode")
    run()
