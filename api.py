"""
RATS FastAPI Application

Main entry point for the RATS wellness API.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import MongoDB
from common.utils import success_response

# App-specific imports
from rats.config import settings
from rats.models import DOCUMENT_MODELS

# Import routers
from rats.routers import (
    auth_router,
    user_router,
    food_router,
    events_router,
    meditation_router,
    nutrition_router,
    ai_router,
    social_auth_router,
    social_posts_router,
    posts_router,
    tasks_router,
    wellness_router,
)

# Import service initialization
from rats.dependencies import init_all_services


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Validates configuration, connects to MongoDB and initializes services.
    """
    # Startup
    print("Starting RATS API...")

    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        document_models=DOCUMENT_MODELS,
    )
    print(f"Connected to database: {settings.MONGODB_DATABASE}")

    init_all_services(db=main_db.db, app_settings=settings)
    print(f"All services initialized (AI provider: {settings.AI_PROVIDER})")

    print("RATS API started successfully!")

    yield

    # Shutdown
    print("Shutting down RATS API...")
    await main_db.disconnect()
    print("RATS API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="RATS API",
    description="Calorie tracking, meditation, nutrition coaching and event reminders",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
API_PREFIX = "/api"

app.include_router(auth_router, prefix=API_PREFIX, tags=["Authentication"])
app.include_router(user_router, prefix=API_PREFIX, tags=["Users"])
app.include_router(food_router, prefix=API_PREFIX, tags=["Food"])
app.include_router(events_router, prefix=API_PREFIX, tags=["Events"])
app.include_router(meditation_router, prefix=API_PREFIX, tags=["Meditation"])
app.include_router(nutrition_router, prefix=API_PREFIX, tags=["Nutrition"])
app.include_router(ai_router, prefix=API_PREFIX, tags=["AI"])
app.include_router(social_auth_router, prefix=API_PREFIX, tags=["Social Auth"])
app.include_router(social_posts_router, prefix=API_PREFIX, tags=["Social Posts"])
app.include_router(posts_router, prefix=API_PREFIX, tags=["Community"])
app.include_router(tasks_router, prefix=API_PREFIX, tags=["Tasks"])
app.include_router(wellness_router, prefix=API_PREFIX, tags=["Wellness"])


# =============================================================================
# Health Check Endpoints
# =============================================================================
@app.get(f"{API_PREFIX}/health", tags=["Health"])
async def api_health():
    """Liveness check used by the client."""
    return {"status": "UP", "message": "RATS server is running!"}


@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and the database connection.
    """
    return success_response({
        "status": "ok",
        "version": "1.0.0",
        "database": main_db.is_connected and await main_db.ping(),
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
