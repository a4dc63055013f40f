# src/db_navigator/web_interface/app.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from db_navigator import __version__
from db_navigator.config.logging_config import LoggingConfig
from db_navigator.web_interface.dependencies import api_config, get_backend, shutdown_backend
from db_navigator.web_interface.models import HealthResponse

# Configure logging
logging_config = LoggingConfig()
logging_config.configure()
logger = logging_config.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The backend variant is fixed for the life of the process
    backend = get_backend()
    logger.info(f"Database navigator API started with the {backend.name} backend")
    yield
    shutdown_backend()


# Create FastAPI app
app = FastAPI(
    title="Database Navigator API",
    description="Browse databases, tables and paginated, sorted, filtered rows",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.get_cors_origins(),
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# Root endpoint
@app.get("/")
async def root():
    return {"message": "API server is running."}


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    return {
        "status": "ok",
        "api_version": app.version,
        "backend": get_backend().name
    }


# Import and include routers
from db_navigator.web_interface.routes.navigator_routes import router as navigator_router

app.include_router(navigator_router, prefix="/api", tags=["navigator"])


# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)}
    )
