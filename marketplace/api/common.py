"""
Shared response helpers for the API routers.

Service results become the front end's {success, ...} envelope; failures use
the status code of their ErrorKind. Navigations recorded during the request
become 303 redirects. Session cookies are written on every response.
"""

from typing import Any

from fastapi.responses import JSONResponse, RedirectResponse, Response

from marketplace.middleware.auth import SessionContext
from marketplace.models.result import Err, Result, to_envelope


def envelope_response(
    context: SessionContext, result: Result[Any], key: str | None = None, status_code: int = 200
) -> Response:
    if isinstance(result, Err):
        response = JSONResponse(status_code=result.status_code, content=to_envelope(result))
    else:
        response = JSONResponse(status_code=status_code, content=to_envelope(result, key))
    return context.cookies.apply(response)


def redirect_or_envelope(
    context: SessionContext, result: Result[Any], key: str | None = None
) -> Response:
    """Follow the navigation a successful operation requested, like the browser would"""
    target = context.navigator.redirect_target
    if isinstance(result, Err) or target is None:
        return envelope_response(context, result, key)
    return context.cookies.apply(RedirectResponse(url=target.url, status_code=303))
