import os
import platform
import resource
import sys
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.deps import get_app_settings

router = APIRouter()

_STARTED = time.monotonic()


def _memory_mb() -> dict:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is KiB on Linux, bytes on macOS
    scale = 1024 * 1024 if sys.platform == "darwin" else 1024
    return {"max_rss": f"{round(usage.ru_maxrss / scale)} MB"}


def _base_payload(settings: Settings, message: str) -> dict:
    return {
        "success": True,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED, 3),
        "environment": settings.env,
        "version": settings.version,
    }


@router.get("")
async def health(settings: Settings = Depends(get_app_settings)):
    """Health check for load balancers and monitoring."""
    return _base_payload(settings, "Razorpay relay API is running")


@router.get("/detailed")
async def health_detailed(settings: Settings = Depends(get_app_settings)):
    payload = _base_payload(settings, "Detailed health check")
    payload["system"] = {
        "python_version": platform.python_version(),
        "platform": platform.system().lower(),
        "arch": platform.machine(),
        "pid": os.getpid(),
        "memory": _memory_mb(),
    }
    payload["services"] = {
        "razorpay": {
            "environment": settings.razorpay_environment,
            "key_id": "Configured" if settings.razorpay_key_id else "Not configured",
            "base_url": settings.razorpay_base_url,
        }
    }
    return payload
