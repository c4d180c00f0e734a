from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from geopost.core.config import settings
from geopost.core.errors import GeoPostError
from geopost.db.init_db import create_all_tables
from geopost.middleware.request_logging import RequestLoggingMiddleware
from geopost.modules.user_management.api.router import router as user_router
from geopost.modules.friendships.api.router import router as friendships_router
from geopost.modules.groups.api.router import router as groups_router
from geopost.modules.posts.api.router import router as posts_router
from geopost.modules.posts.comments.api.router import router as comments_router
from geopost.modules.locations.api.router import router as locations_router
from geopost.modules.tags.api.router import router as tags_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("geopost")

# Initialize the FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    debug=settings.DEBUG,
    description="Location-aware social posting service",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting server in {settings.ENVIRONMENT} mode")
    if not create_all_tables():
        logger.error("Database tables could not be created; requests will fail until the database is reachable")

@app.exception_handler(GeoPostError)
async def geopost_error_handler(request: Request, exc: GeoPostError):
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())

# Add middleware
app.add_middleware(RequestLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(user_router, prefix=f"{settings.API_V1_STR}/users", tags=["users"])
app.include_router(friendships_router, prefix=f"{settings.API_V1_STR}/friends", tags=["friendships"])
app.include_router(groups_router, prefix=f"{settings.API_V1_STR}/groups", tags=["groups"])
app.include_router(posts_router, prefix=f"{settings.API_V1_STR}/posts", tags=["posts"])
app.include_router(comments_router, prefix=f"{settings.API_V1_STR}/posts/{{post_id}}/comments", tags=["comments"])
app.include_router(locations_router, prefix=f"{settings.API_V1_STR}/locations", tags=["locations"])
app.include_router(tags_router, prefix=f"{settings.API_V1_STR}/tags", tags=["tags"])

@app.get("/")
async def root():
    return {
        "message": "Welcome to GeoPost",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "documentation": "/docs" if settings.DEBUG else None,
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("geopost.main:app", host="0.0.0.0", port=8000, reload=True)
