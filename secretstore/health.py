"""
Health check endpoints for liveness and readiness probes.
"""
from datetime import datetime, timezone
from typing import Dict, Any
import psutil
import structlog

from .adapters.base import KeyValueBackend

logger = structlog.get_logger()


class HealthChecker:
    """
    Health checker for the secret store service.

    Provides:
    - Liveness checks (is the service running?)
    - Readiness checks (can the service reach its backend and host resources?)
    """

    def __init__(self, backend: KeyValueBackend, service_name: str = "secretstore", version: str = "0.1.0"):
        self.backend = backend
        self.service_name = service_name
        self.version = version

    def _timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def liveness(self) -> Dict[str, Any]:
        """
        Liveness check - basic health check.

        Returns:
            dict: Health status with service info and timestamp
        """
        return {
            "status": "ok",
            "service": self.service_name,
            "version": self.version,
            "timestamp": self._timestamp(),
        }

    async def readiness(self) -> Dict[str, Any]:
        """
        Readiness check.

        Checks:
        - Storage backend connectivity
        - Disk space availability
        - Memory availability

        Returns:
            dict: Readiness status with detailed check results
        """
        checks = {
            "backend": await self._check_backend(),
            "disk_space": self._check_disk_space(),
            "memory": self._check_memory(),
        }
        ready = all(check["status"] != "error" for check in checks.values())

        return {
            "status": "ready" if ready else "not_ready",
            "service": self.service_name,
            "version": self.version,
            "timestamp": self._timestamp(),
            "checks": checks,
        }

    async def _check_backend(self) -> Dict[str, Any]:
        backend_type = type(self.backend).__name__
        if await self.backend.health_check():
            return {"status": "ok", "type": backend_type}
        return {"status": "error", "type": backend_type}

    def _check_disk_space(self, threshold_gb: float = 1.0) -> Dict[str, Any]:
        """
        Check available disk space.

        Args:
            threshold_gb: Minimum available disk space in GB (default: 1.0)
        """
        try:
            disk = psutil.disk_usage("/")
        except OSError as e:
            logger.warning("disk_health_check_failed", error=str(e))
            return {"status": "error", "error": str(e)}

        available_gb = disk.free / (1024**3)
        return {
            "status": _grade(available_gb, threshold_gb),
            "available_gb": round(available_gb, 2),
            "used_percent": disk.percent,
        }

    def _check_memory(self, threshold_mb: float = 50.0) -> Dict[str, Any]:
        """
        Check available memory.

        Args:
            threshold_mb: Minimum available memory in MB (default: 50.0)
        """
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024**2)
        return {
            "status": _grade(available_mb, threshold_mb),
            "available_mb": round(available_mb, 2),
            "used_percent": memory.percent,
        }


def _grade(available: float, threshold: float) -> str:
    if available < threshold:
        return "error"
    if available < threshold * 2:
        return "warning"
    return "ok"
