import os
from slowapi import Limiter
from slowapi.util import get_remote_address

# memory:// for a single worker, redis://host:6379 when running several
RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=RATE_LIMIT_STORAGE_URI,
    default_limits=["100/minute"]
)
