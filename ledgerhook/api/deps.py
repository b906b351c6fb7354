"""
ledgerhook.api.deps — FastAPI dependency injection
==================================================
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from ledgerhook.runtime import Runtime


def get_runtime(request: Request) -> Runtime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "Service starting")
    return runtime


def require_admin(
    runtime: Annotated[Runtime, Depends(get_runtime)],
    x_admin_key: Annotated[str | None, Header()] = None,
) -> None:
    """Guard admin routes with ``X-Admin-Key`` when an admin key is configured."""
    expected = runtime.cfg.admin_key
    if not expected:
        return
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid admin key")
