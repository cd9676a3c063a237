"""FastAPI application entrypoint for reviewer-api."""
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from pydantic import ValidationError

# Load environment variables from .env file
load_dotenv()

from .presentation.dtos.errors import create_internal_error_response, create_validation_error_response
from .presentation.routers.generation_router import router as generation_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
# Reduce HTTP client logging to WARNING to reduce noise
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('openai').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

app = FastAPI(title="reviewer-api")

# Include routers
app.include_router(generation_router)


@app.get("/health", tags=["Health"])
async def health() -> dict:
    return {"status": "ok"}


@app.exception_handler(ValidationError)
async def validation_exception_handler(request, exc: ValidationError):
    """Handle Pydantic validation errors."""
    logger.error(f"Pydantic validation error on {request.url.path}: {exc.errors()}")
    return create_validation_error_response(exc)


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected error: {exc}")
    return create_internal_error_response()
