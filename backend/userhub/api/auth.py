"""Authentication & Rate Limiting — FastAPI dependencies resolving the caller identity.

Invariants:
    - Key read from the x-api-key header, else the api_key query parameter
    - Keys compared in constant time against a static allow-list plus settings.api_key
    - No key: guest identity outside strict mode, 401 inside it
    - Unknown key: always 401
    - Rate-limit key: user_<id> when authenticated, ip_<client host> for guests
    - SYSTEM identities bypass the rate limiter entirely
    - Identity resolved before the rate limiter runs (limiter needs it for keying)

Design Decisions:
    - Callable class for auth (like an HTTPBearer scheme) built once per app and stored on
      app.state; route modules depend on the thin functions below
    - FastAPI caches dependencies per request: authenticate runs once even when both a
      router dependency and a handler parameter ask for it
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Callable

from fastapi import Depends, Request, Response

from userhub.config import Settings
from userhub.core.domain_types import GUEST_IDENTITY, Identity, Role
from userhub.core.errors import (
    AuthenticationError, PermissionDeniedError, RateLimitExceededError,
)
from userhub.infrastructure.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
API_KEY_QUERY = "api_key"

STATIC_API_KEYS: dict[str, Identity] = {
    "demo-key-123": Identity(id=1, name="Demo User", role=Role.USER),
    "test-key-456": Identity(id=2, name="Test User", role=Role.TESTER),
    "jenkins-build-key": Identity(id=3, name="Jenkins CI/CD", role=Role.SYSTEM),
    "ci-cd-pipeline-key": Identity(id=4, name="CI/CD Pipeline", role=Role.SYSTEM),
}

# Identity for the deployment-specific key from settings.api_key.
CONFIGURED_KEY_IDENTITY = Identity(id=0, name="API Key User", role=Role.USER)


class APIKeyAuth:
    """Resolve an Identity from an API key using constant-time comparisons."""

    def __init__(self, settings: Settings):
        self._keys: dict[str, Identity] = dict(STATIC_API_KEYS)
        if settings.api_key and settings.api_key not in self._keys:
            self._keys[settings.api_key] = CONFIGURED_KEY_IDENTITY
        self.strict = settings.strict_auth

    def resolve(self, api_key: str | None) -> Identity:
        if not api_key:
            if self.strict:
                raise AuthenticationError(
                    "Please provide an API key in x-api-key header or api_key query parameter",
                )
            logger.debug("No API key provided - proceeding with guest access")
            return GUEST_IDENTITY

        for key, identity in self._keys.items():
            if secrets.compare_digest(api_key.encode(), key.encode()):
                return identity

        raise AuthenticationError(
            "The provided API key is not valid", title="Invalid API key",
        )

    async def __call__(self, request: Request) -> Identity:
        api_key = (
            request.headers.get(API_KEY_HEADER)
            or request.query_params.get(API_KEY_QUERY)
        )
        identity = self.resolve(api_key)
        request.state.identity = identity
        if identity.authenticated:
            logger.info(
                f"Authenticated request from: {identity.name} ({identity.role.value})",
                extra={"identity": identity.name},
            )
        return identity


async def authenticate(request: Request) -> Identity:
    """Resolve the caller identity via the app's APIKeyAuth."""
    return await request.app.state.auth(request)


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limit_key(identity: Identity, request: Request) -> str:
    if identity.authenticated:
        return f"user_{identity.id}"
    return f"ip_{_client_host(request)}"


async def enforce_rate_limit(
    request: Request,
    response: Response,
    identity: Identity = Depends(authenticate),
) -> Identity:
    """Count this request against the caller's sliding window."""
    if identity.is_system:
        return identity

    limiter: SlidingWindowRateLimiter = request.app.state.rate_limiter
    decision = limiter.check(rate_limit_key(identity, request))
    reset_at = datetime.fromtimestamp(decision.reset_at, timezone.utc)

    if not decision.allowed:
        logger.warning(
            f"Rate limit exceeded for {rate_limit_key(identity, request)}",
            extra={"identity": identity.name, "path": request.url.path},
        )
        raise RateLimitExceededError(
            retry_after=decision.retry_after,
            limit=decision.limit,
            window_seconds=limiter.window_seconds,
            reset_at=reset_at,
        )

    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": reset_at.isoformat(),
    }
    # error handlers re-attach these when the route itself fails
    request.state.rate_limit_headers = headers
    response.headers.update(headers)
    return identity


def require_roles(*roles: Role) -> Callable:
    """Dependency factory: 403 unless the caller holds one of roles."""
    allowed = set(roles)

    async def _check(identity: Identity = Depends(authenticate)) -> Identity:
        if identity.role not in allowed:
            raise PermissionDeniedError([r.value for r in roles])
        return identity

    return _check
