from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..dependencies import get_day_store, get_panchanga_service


router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health")
def health(service=Depends(get_panchanga_service), store=Depends(get_day_store)):
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "panchanga_cache": service.get_cache_stats(),
            "day_store": {"rows": len(store)},
        },
    }
