"""
Job Board API
=============
REST backend for a job board

Flow:
1. Employers register and post jobs
2. Jobseekers search active jobs and apply with their profile resume
3. Employers review applicants and move them through the hiring funnel
4. Admins oversee every job and application

Every response uses the envelope
{success, message?, data?, errors?, count?, total?, page?, pages?}
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from jobboard.api import api_router
from jobboard.core.config import settings
from jobboard.core.database import init_db
from jobboard.core.exceptions import (
    AuthenticationException, AuthorizationException, JobBoardException,
    ResourceNotFoundException, UnexpectedException
)
from jobboard.core.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create tables on startup"""
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME}...")
    init_db()
    logger.info("Database initialized")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    description="""
## Job Board API

### Features:
- **Job Search**: Filter, sort and paginate active postings
- **Job Management**: Employers post, edit and remove their jobs
- **Applications**: Jobseekers apply once per job with their resume on file
- **Applicant Review**: Employers move applicants through the hiring funnel
- **Statistics**: Per-employer job and application figures
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, errors=None) -> JSONResponse:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(JobBoardException)
async def job_board_exception_handler(request: Request, exc: JobBoardException):
    """Translate domain exceptions into the error envelope"""
    if isinstance(exc, AuthenticationException):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, AuthorizationException):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ResourceNotFoundException):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, UnexpectedException):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        # ValidationException, ConflictException
        status_code = status.HTTP_400_BAD_REQUEST

    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(status_code, "Server error")

    logger.debug(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return _error(status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path")),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return _error(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")


app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": settings.APP_NAME}


@app.get("/")
def root():
    """Root endpoint with API info"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "endpoints": {
            "auth": "/api/v1/auth",
            "jobs": "/api/v1/jobs",
            "users": "/api/v1/users",
            "applications": "/api/v1/applications",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("jobboard.main:app", host="0.0.0.0", port=8000, reload=True)
