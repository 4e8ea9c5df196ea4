"""Limiteur de requetes / Request rate limiter.

Cle par IP ; applique sur la connexion (voir settings.RATE_LIMIT_LOGIN).
Keyed by client IP; applied to login (see settings.RATE_LIMIT_LOGIN).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from treatment_dispatch.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
