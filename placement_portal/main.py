"""
Campus Placement Portal - Main Application

FastAPI backend with:
- MongoDB for students, admins and notices
- JWT authentication (students log in with their USN)
- Eligibility matching and placement statistics computed per request

Run: uvicorn placement_portal.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from placement_portal import __version__
from placement_portal.api.routes import api_router
from placement_portal.core.config import get_settings
from placement_portal.core.errors import PortalError, http_status_for
from placement_portal.core.logging import setup_logging
from placement_portal.db.mongodb import close_mongo_client, init_mongo_indexes, test_mongo_connection
from placement_portal.schemas.schemas import ErrorResponse

settings = get_settings()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Campus Placement Portal",
    description="""
    Placement notices targeted by semester, branch and CGPA.

    ## Features
    - **Authentication**: USN-based student registration, admin login, JWT
    - **Students**: Profile updates, eligible notice feed
    - **Notices**: Admin publishing with targeting criteria
    - **Placement**: Admin-managed placed / not placed status
    - **Analytics**: Placement rate, company counts, average package
    """,
    version=__version__,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Map portal error codes to HTTP responses."""
    status_code = http_status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(code=exc.code.value, detail=exc.message).model_dump(),
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Configure logging and initialize MongoDB indexes on startup."""
    setup_logging(settings.log_level, settings.log_dir)
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.on_event("shutdown")
async def shutdown_event():
    """Release the MongoDB connection pool."""
    close_mongo_client()


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Campus Placement Portal"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
