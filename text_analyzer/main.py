from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import os

from text_analyzer.database import init_db
from text_analyzer.api.routes import router
from text_analyzer.exceptions import CorpusUnavailable, QueryCancelled, StorageError, UnparseableQuery

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Pydantic error types that mean "right field, wrong JSON type"
WRONG_TYPE_ERRORS = {"string_type", "string_unicode"}

# Create FastAPI app
app = FastAPI(
    title="String Analyzer Service",
    description="Analyze and store string properties, then query them with filters or plain English",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Initialize database on startup
@app.on_event("startup")
def on_startup():
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized successfully")


# Include routers
app.include_router(router, tags=["strings"])


# Root endpoint
@app.get("/")
def root():
    return {
        "message": "String Analyzer Service",
        "version": "1.0.0",
        "endpoints": {
            "POST /strings": "Analyze and store a string",
            "GET /strings/{string_value}": "Get specific string analysis",
            "GET /strings": "Get all strings with optional filters",
            "GET /strings/filter-by-natural-language": "Filter using natural language",
            "DELETE /strings/{string_value}": "Delete a string",
            "GET /docs": "API documentation"
        }
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# Validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}
    status_code = status.HTTP_400_BAD_REQUEST
    for error in exc.errors():
        location = error['loc']
        field = str(location[-1])
        errors[field] = error['msg']
        if location[0] == 'body' and error['type'] in WRONG_TYPE_ERRORS:
            status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    if status_code == status.HTTP_422_UNPROCESSABLE_ENTITY:
        message = "Invalid data type for 'value' (must be string)"
    elif any(error['loc'][0] == 'query' for error in exc.errors()):
        message = "Invalid query parameter values or types"
    else:
        message = "Invalid request body or missing 'value' field"

    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "details": errors
        }
    )


# HTTPException handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # If detail is already a dict with 'error' key, return as is
    if isinstance(exc.detail, dict) and 'error' in exc.detail:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail
        )
    # Otherwise wrap it
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)}
    )


@app.exception_handler(UnparseableQuery)
async def unparseable_query_handler(request: Request, exc: UnparseableQuery):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Unable to parse natural language query",
            "details": str(exc)
        }
    )


@app.exception_handler(CorpusUnavailable)
@app.exception_handler(StorageError)
@app.exception_handler(QueryCancelled)
async def corpus_exception_handler(request: Request, exc: Exception):
    logger.error(f"Corpus request failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "Text corpus unavailable",
            "details": str(exc)
        }
    )


# Generic error handler
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error"
        }
    )


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("text_analyzer.main:app", host="0.0.0.0", port=port, reload=True)
