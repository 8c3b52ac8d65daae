# 📄 File: harvest_hub/api/router.py
# 🧭 Purpose (Layman Explanation):
# The traffic director: it sends each request to the right part of the app, so sign-in
# requests go to the account code and garden requests go to the garden code.
# 🧪 Purpose (Technical Summary):
# Aggregates the module routers under their /api prefixes, plus the health check and
# the /api index endpoint.
# 🔗 Dependencies:
# FastAPI, module routers
# 🔄 Connected Modules / Calls From:
# harvest_hub.main

from typing import Any, Dict

from fastapi import APIRouter

from harvest_hub.api.health import health_router
from harvest_hub.modules.crop_management import crop_router
from harvest_hub.modules.garden_management import garden_router
from harvest_hub.modules.user_management import auth_router, profile_router

ROUTE_PREFIXES = {
    "auth": "/api/auth",
    "gardens": "/api/gardens",
    "crops": "/api/crops",
    "profile": "/api/profile",
}

API_TAGS = {
    "auth": ["Authentication"],
    "gardens": ["Gardens"],
    "crops": ["Crops"],
    "profile": ["Profile"],
}

api_router = APIRouter()

api_router.include_router(health_router)


@api_router.get("/api", summary="API Information", tags=["API Info"])
async def api_info() -> Dict[str, Any]:
    """Index of the available route groups."""
    return {
        "message": "Harvest Hub API",
        "endpoints": {**ROUTE_PREFIXES, "health": "/health"},
    }


api_router.include_router(auth_router, prefix=ROUTE_PREFIXES["auth"], tags=API_TAGS["auth"])
api_router.include_router(garden_router, prefix=ROUTE_PREFIXES["gardens"], tags=API_TAGS["gardens"])
api_router.include_router(crop_router, prefix=ROUTE_PREFIXES["crops"], tags=API_TAGS["crops"])
api_router.include_router(profile_router, prefix=ROUTE_PREFIXES["profile"], tags=API_TAGS["profile"])
