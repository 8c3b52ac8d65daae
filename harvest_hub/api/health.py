# 📄 File: harvest_hub/api/health.py
# 🧭 Purpose (Layman Explanation):
# A tiny "are you alive?" endpoint that load balancers and uptime checks can call.
# 🧪 Purpose (Technical Summary):
# Liveness endpoint returning a fixed status document with the current UTC timestamp.
# 🔗 Dependencies:
# FastAPI
# 🔄 Connected Modules / Calls From:
# harvest_hub.api.router, monitoring systems

from typing import Any, Dict

from fastapi import APIRouter

from harvest_hub.shared.utils.helpers import utc_now_iso

health_router = APIRouter()


@health_router.get(
    "/health",
    summary="Basic Health Check",
    description="Basic health check endpoint for load balancers and monitoring",
    tags=["Health Check"],
)
async def health_check() -> Dict[str, Any]:
    return {
        "status": "OK",
        "message": "Harvest Hub API is running",
        "timestamp": utc_now_iso(),
    }
