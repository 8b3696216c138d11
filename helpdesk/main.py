# helpdesk/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from helpdesk.config import MONGODB_URI
from helpdesk.db import create_client, get_database, init_indexes
from helpdesk.routers import tickets  # Tickets router
from helpdesk.schemas.response import ApiResponse
from helpdesk.utils.logging_config import logger


# -------------------------
# Lifespan: one store client per process
# -------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    client = create_client(MONGODB_URI)
    app.state.db = get_database(client)
    await init_indexes(app.state.db)
    logger.info("Connected to database '%s'", app.state.db.name)
    try:
        yield
    finally:
        client.close()
        logger.info("Database client closed")


# -------------------------
# Initialize FastAPI App
# -------------------------
app = FastAPI(title="Helpdesk Tickets API", lifespan=lifespan)


# -------------------------
# Exception Handlers: every error body is an envelope
# -------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict) and "success" in exc.detail:
        content = exc.detail
    else:
        content = jsonable_encoder(
            ApiResponse.error_response(str(exc.detail), statusCode=exc.status_code)
        )
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    envelope = ApiResponse.error_response(
        "Request validation failed", errors, 422
    )
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder(envelope),
    )


# -------------------------
# Root Route
# -------------------------
@app.get("/")
def read_root():
    return ApiResponse.success_response(None, "Welcome to the Helpdesk Tickets API!")


# -------------------------
# Include Routers
# -------------------------
app.include_router(tickets.router)


if __name__ == "__main__":
    uvicorn.run("helpdesk.main:app", host="0.0.0.0", port=8000)
