from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookit.config import get_settings
from bookit.database import get_db_client
from bookit.exceptions import register_exception_handlers
from bookit.logger_config import configure_logging
from bookit.routers import admin, host_request, owner_booking, venue

settings = get_settings()
configure_logging(settings)

# Create FastAPI app
app = FastAPI(
    title="BookIt - Venue Booking Platform",
    description="Venue hosting, moderation and time-slot seat booking",
    version=settings.version
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

register_exception_handlers(app)

# Include routers
app.include_router(host_request.router)
app.include_router(owner_booking.router)
app.include_router(venue.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name} - Venue Booking Platform",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/db-test")
async def test_database(db=Depends(get_db_client)):
    """Test DynamoDB connection"""
    return db.test_connection()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "bookit.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
