from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# One shared budget per client IP across every /api route
limiter = Limiter(key_func=get_remote_address, application_limits=[settings.rate_limit])
