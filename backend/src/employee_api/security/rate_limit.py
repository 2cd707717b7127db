"""Rate limiting configuration for mutating endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from employee_api.config import get_settings


def _get_rate_limit_settings() -> dict[str, str]:
    """Get rate limit strings from configuration.

    Returns:
        Dictionary of rate limit strings
    """
    settings = get_settings()
    return {
        "default": f"{settings.rate_limit_default}/minute",
        "mutations": f"{settings.rate_limit_mutations}/minute",
    }


_rate_limits = _get_rate_limit_settings()

# In-memory storage: limits are per process
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_rate_limits["default"]],
    storage_uri="memory://",
    enabled=get_settings().rate_limit_enabled,
)

API_DEFAULT_LIMIT = _rate_limits["default"]
MUTATION_LIMIT = _rate_limits["mutations"]

# Seconds a client is asked to wait after exceeding a per-minute limit
RETRY_AFTER_SECONDS = 60
