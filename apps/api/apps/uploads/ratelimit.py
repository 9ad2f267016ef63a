"""
Per-IP rate limiter for upload endpoints.

Fixed window with a temporary block: each IP may make `limit` requests per
`window_seconds`; the next one blocks it for `block_seconds`. Once the block
expires the IP starts a fresh window. State lives in an injected store.
CacheRateLimitStore keeps it in the Django cache, which is per-process with
the local-memory backend and shared between instances with Redis.
Read-modify-write is not atomic, so concurrent requests may slip a few over
the limit: the limiter is advisory abuse protection, not an authoritative
quota.
"""
import math
import time
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from django.conf import settings
from django.core.cache import cache as default_cache
from rest_framework.throttling import BaseThrottle

from apps.audit.models import AuditActionChoices
from apps.audit.services import log_security_event
from apps.core.observability import metrics
from apps.core.observability.correlation import get_client_ip
from apps.core.observability.events import log_upload_rate_limited


@dataclass
class RateLimitEntry:
    count: int
    window_start: float
    blocked_until: Optional[float] = None


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    retry_after: Optional[int] = None


class InMemoryRateLimitStore:
    """Process-local dict store."""

    def __init__(self):
        self._entries = {}

    def get(self, key):
        return self._entries.get(key)

    def set(self, key, entry, ttl):
        self._entries[key] = entry


class CacheRateLimitStore:
    """Store over a Django cache backend; entries expire after `ttl` seconds."""

    def __init__(self, cache=None, prefix='ratelimit:upload'):
        self.cache = cache or default_cache
        self.prefix = prefix

    def _key(self, key):
        return f'{self.prefix}:{key}'

    def get(self, key):
        data = self.cache.get(self._key(key))
        return RateLimitEntry(**data) if data else None

    def set(self, key, entry, ttl):
        self.cache.set(self._key(key), asdict(entry), timeout=int(math.ceil(ttl)))


class RateLimiter:

    def __init__(
        self,
        store,
        limit: int = 20,
        window_seconds: float = 60 * 60,
        block_seconds: float = 15 * 60,
        disabled: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self.block_seconds = block_seconds
        self.disabled = disabled
        self.clock = clock

    @classmethod
    def from_settings(cls, store=None, **overrides):
        config = settings.UPLOAD_RATE_LIMIT
        kwargs = {
            'limit': config['LIMIT'],
            'window_seconds': config['WINDOW_SECONDS'],
            'block_seconds': config['BLOCK_SECONDS'],
            'disabled': config['DISABLED'],
        }
        kwargs.update(overrides)
        return cls(store or CacheRateLimitStore(), **kwargs)

    def check(self, ip: str) -> RateLimitResult:
        """
        Count one request for `ip`.

        Blocked IPs get the remaining block time (rounded up) as
        retry_after; the request that crosses the limit gets the full
        block duration.
        """
        if self.disabled:
            return RateLimitResult(allowed=True)

        now = self.clock()
        entry = self.store.get(ip) or RateLimitEntry(count=0, window_start=now)

        if entry.blocked_until is not None and now < entry.blocked_until:
            return RateLimitResult(
                allowed=False,
                retry_after=int(math.ceil(entry.blocked_until - now)),
            )

        # Expired block or elapsed window: count from zero again
        if entry.blocked_until is not None or now - entry.window_start > self.window_seconds:
            entry = RateLimitEntry(count=0, window_start=now)

        entry.count += 1
        ttl = self.window_seconds + self.block_seconds

        if entry.count > self.limit:
            entry.blocked_until = now + self.block_seconds
            self.store.set(ip, entry, ttl)
            return RateLimitResult(
                allowed=False,
                retry_after=int(math.ceil(self.block_seconds)),
            )

        self.store.set(ip, entry, ttl)
        return RateLimitResult(allowed=True)


class UploadRateThrottle(BaseThrottle):
    """
    DRF throttle backed by RateLimiter.

    Rejections surface as HTTP 429 with Retry-After (see
    apps.core.exceptions.omni_exception_handler) and are written to the
    audit log.
    """

    def __init__(self):
        self.retry_after = None

    def get_limiter(self):
        return RateLimiter.from_settings()

    def allow_request(self, request, view):
        ip = get_client_ip(request)
        result = self.get_limiter().check(ip)
        if result.allowed:
            return True

        self.retry_after = result.retry_after
        metrics.upload_rate_limited_total.inc()
        log_upload_rate_limited(ip, result.retry_after)
        log_security_event(
            AuditActionChoices.RATE_LIMIT_EXCEEDED,
            request.path,
            user=request.user,
            retryAfter=result.retry_after,
        )
        return False

    def wait(self):
        return self.retry_after
