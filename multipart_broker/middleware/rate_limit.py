"""Rate limiting middleware using slowapi."""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from ..config import settings
from ..schemas.upload import GenericResponse
from ..utils.constants import TOO_MANY_REQUESTS_MESSAGE


def create_limiter(per_minute: int, enabled: bool = True) -> Limiter:
    """Build a limiter keyed on client address, applied to every route by SlowAPIMiddleware."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{per_minute}/minute"],
        enabled=enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer with the ``{code, message}`` envelope used by every other error."""
    response = JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=GenericResponse(
            code=status.HTTP_429_TOO_MANY_REQUESTS,
            message=TOO_MANY_REQUESTS_MESSAGE,
        ).model_dump(),
    )
    return request.app.state.limiter._inject_headers(
        response, getattr(request.state, "view_rate_limit", None)
    )


# Initialize rate limiter
limiter = create_limiter(settings.rate_limit_per_minute, settings.rate_limit_enabled)
