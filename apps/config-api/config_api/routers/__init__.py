"""Router registry for config-api (health, metrics, config, admin)."""

from .health import router as health_router
from .metrics import router as metrics_router
from .config import router as config_router
from .admin import router as admin_router
