import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .routes.evaluation import router as evaluation_router


# Load environment variables from .env file
load_dotenv()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    logger.info("Starting Design Feasibility Engine")
    logger.info("   Log level:     %s", settings.log_level)
    logger.info("   Advisory fee:  %s", settings.default_advisory_fee or "not set (ROI ratios = 0)")
    logger.info("   Ready to evaluate projects!")

    yield

    logger.info("Shutting down Design Feasibility Engine")


app = FastAPI(
    title="Design Feasibility Engine",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
)

app.include_router(evaluation_router)

@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Design Feasibility Engine",
        "version": "0.1.0",
        "description": "Deterministic feasibility scoring for real-estate interior design projects",
        "docs": "/docs",
        "endpoints": {
            "evaluate": "POST /feasibility/evaluate - Score a project",
            "sensitivity": "POST /feasibility/sensitivity - Rank inputs by influence",
            "scenarios": "POST /feasibility/scenarios - Compare what-if scenarios",
            "roi": "POST /feasibility/roi - Monetize the composite score",
            "value_add": "POST /feasibility/value-add - Fitout upgrade yield and payback",
            "health": "GET /health - Service health check"
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "design-feasibility-engine",
        "version": "0.1.0"
    }

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "feasibility.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
