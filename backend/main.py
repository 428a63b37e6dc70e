"""
FastAPI Application Entry Point
"""
import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.exceptions import InvalidInputError
from app.routes import habits, health

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Silence noisy third-party loggers
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('hpack').setLevel(logging.WARNING)

app = FastAPI(
    title="Habit Tracker API",
    version="0.1.0"
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields are invalid input (400), like engine-side checks"""
    return JSONResponse(
        status_code=InvalidInputError.status_code,
        content={"detail": {
            "code": InvalidInputError.code,
            "message": "Invalid request",
            "errors": jsonable_encoder(exc.errors())
        }}
    )


# Register routes
app.include_router(health.router)
app.include_router(habits.router)
