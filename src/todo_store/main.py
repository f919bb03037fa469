import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_setup import setup_logging
from .results import ErrorKind, ResultError
from .settings import get_settings
from .routers import todos as todos_router

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "Create, read, update, delete and complete todos; tag paging, search and date sorting.",
    },
]

# Status code for each store error kind
ERROR_STATUS = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_COMPLETED: 409,
    ErrorKind.INDEX_OUT_OF_BOUNDS: 400,
    ErrorKind.INVALID_RANGE: 400,
    ErrorKind.RANGE_TOO_LARGE: 400,
}

_settings = get_settings()
setup_logging(_settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Todo Store",
    description="Persistent to-do list service over an ordered key-value store.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": ErrorKind.VALIDATION.value,
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(ResultError)
async def store_error_handler(request: Request, exc: ResultError) -> JSONResponse:
    """
    Turn a failed store result into {"error": <kind>, "message": <text>}.
    """
    logger.debug("%s %s -> %s", request.method, request.url.path, exc.error.kind.value)
    return JSONResponse(
        status_code=ERROR_STATUS[exc.error.kind],
        content={"error": exc.error.kind.value, "message": exc.error.message},
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# Include routers
app.include_router(todos_router.router)
