"""
API v1 router setup
All routes are scoped to a business: /businesses/{business_id}/...
"""
from fastapi import APIRouter

from booking_api.api.v1.dashboard import appointments, availability, schedule

api_v1_router = APIRouter()

# ============================================================================
# SCHEDULE CONFIGURATION
# ============================================================================
api_v1_router.include_router(schedule.router)

# ============================================================================
# AVAILABILITY & BOOKING
# ============================================================================
api_v1_router.include_router(availability.router)
api_v1_router.include_router(appointments.router)


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information and available endpoint groups."""
    return {
        "version": "1.0",
        "resources": {
            "schedule": "/api/v1/businesses/{business_id}/schedule",
            "availability": "/api/v1/businesses/{business_id}/availability",
            "appointments": "/api/v1/businesses/{business_id}/appointments"
        }
    }
