"""Per-client rate limiter (slowapi), keyed by remote address."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from fuelmap.config import settings

limiter = Limiter(key_func=get_remote_address)

# Applied per route with ``@limiter.limit(RATE_LIMIT)``
RATE_LIMIT = settings.rate_limit
