"""Anonymous per-browser visitor identity carried in a cookie."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Mapping, Optional

from starlette.responses import Response

from weather_monitor.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "prefId"
LEGACY_COOKIE_NAMES = ("pref_id",)
ONE_YEAR = 60 * 60 * 24 * 365  # seconds


@dataclass
class VisitorContext:
    """Cookie state of the current request.

    Attributes:
        cookies: Cookies sent by the browser.
        response: Response that new cookies are written to. None for
            read-only contexts such as page rendering.
        cookie_name: Name of the identity cookie.
    """

    cookies: Mapping[str, str]
    response: Optional[Response] = None
    cookie_name: str = DEFAULT_COOKIE_NAME
    issued: Optional[str] = field(default=None, repr=False)


def peek_identity(ctx: VisitorContext) -> Optional[str]:
    """Get the visitor's identity token without creating one."""
    if ctx.issued:
        return ctx.issued
    for name in (ctx.cookie_name, *LEGACY_COOKIE_NAMES):
        value = ctx.cookies.get(name)
        if value:
            return value
    return None


def ensure_identity(ctx: VisitorContext) -> str:
    """Get the visitor's identity token, issuing a new cookie if absent."""
    existing = peek_identity(ctx)
    if existing:
        return existing

    if ctx.response is None:
        raise ConfigurationError("Visitor identity cannot be issued from a read-only context")

    token = str(uuid.uuid4())
    ctx.response.set_cookie(
        key=ctx.cookie_name,
        value=token,
        max_age=ONE_YEAR,
        path="/",
        httponly=True,
        samesite="lax",
    )
    ctx.issued = token
    logger.info("Issued new visitor identity")
    return token
