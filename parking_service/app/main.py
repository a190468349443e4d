import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import parking_engine, Base
from shared.helpers.exception_handler import setup_exception_handlers
from .models import Users, ParkingSpot, Booking, ParkingSlip  # registers tables
from .router import bookings_router, parking_slips_router, parking_spots_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

app = FastAPI(title="Parking Service API")

# Create all tables
Base.metadata.create_all(bind=parking_engine)

origins = [origin.strip()
           for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
setup_exception_handlers(app)

# Include routers
app.include_router(parking_spots_router.public_router)
app.include_router(parking_spots_router.router)
app.include_router(bookings_router.public_router)
app.include_router(bookings_router.router)
app.include_router(parking_slips_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy", "service": "parking-service"}
