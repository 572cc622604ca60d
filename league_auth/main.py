from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from league_auth.api.routers import auth
from league_auth.shared.config import get_settings


logger = logging.getLogger(__name__)

settings = get_settings()
logging.getLogger("league_auth").setLevel(settings.log_level)

app = FastAPI(title="Picks League API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Submitted values are never echoed back.
    logger.info("main: invalid_request path=%s errors=%s", request.url.path, len(exc.errors()))
    return JSONResponse(status_code=422, content={"error": "Invalid request payload"})


@app.exception_handler(SQLAlchemyError)
def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("main: storage_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
def root():
    return {"message": "Welcome to Picks League API"}


app.include_router(auth.router)
