from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from afterhours.core.config import get_settings
from afterhours.core.errors import DirectoryError
from afterhours.routers.directory import router as directory_router
from afterhours.routers.health import router as health_router
from afterhours.routers.refresh import router as refresh_router

settings = get_settings()

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="After-hours attorney directory API - Evening, weekend and emergency availability for local law offices.",
    version="0.1.0",
)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Unexpected failures share the error envelope of mapped directory errors."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": {"error": "Internal server error", "code": DirectoryError.code}},
    )


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(refresh_router, prefix="/api")
app.include_router(directory_router, prefix="/api")


@app.get("/")
def read_root():
    return {
        "message": "Welcome to the After-Hours Attorney Directory API",
        "docs": "/docs",
        "health": "/health"
    }
