#!/usr/bin/env python3
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from boards import BoardService
from config import (DB_PATH, ALLOWED_ORIGINS, MAX_REQUEST_SIZE_MB, GZIP_MIN_SIZE,
                    HTTP_REQUEST_ENTITY_TOO_LARGE, HTTP_INTERNAL_SERVER_ERROR)
from database import DatabaseManager
from endpoints import create_threads_router, create_replies_router
from exceptions import BoardError, ValidationError
from models import ErrorResponse
from utils import timestamp


logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and not content_length.isdigit():
            return error_response(ValidationError("Invalid Content-Length header"))
        if content_length and int(content_length) > MAX_REQUEST_SIZE_MB * 1024 * 1024:
            return JSONResponse(
                status_code=HTTP_REQUEST_ENTITY_TOO_LARGE,
                content={"message": "Request entity too large"}
            )

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-DNS-Prefetch-Control"] = "off"
        response.headers["Referrer-Policy"] = "same-origin"
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'self';"
        return response


def error_response(exc: BoardError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.__class__.__name__, message=exc.message).model_dump()
    )


def create_app(database: DatabaseManager) -> FastAPI:
    service = BoardService(database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.init_database()
        yield

    app = FastAPI(title="Message Board API", description="Anonymous threads and replies per board",
                  version="1.0.0", lifespan=lifespan)

    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MIN_SIZE)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"]
    )

    app.include_router(create_threads_router(service))
    app.include_router(create_replies_router(service))

    @app.exception_handler(BoardError)
    async def board_exception_handler(request: Request, exc: BoardError):
        if exc.status_code >= HTTP_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_response(exc)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=HTTP_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="InternalServerError", message="An unexpected error occurred").model_dump()
        )

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": timestamp(),
            "database": database.db_path
        }

    return app


app = create_app(DatabaseManager(DB_PATH))
