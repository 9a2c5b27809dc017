from __future__ import annotations
import sys

import httpx

from .. import __version__

USER_AGENT = f"steamauth/{__version__} ({sys.platform}) httpx/{httpx.__version__}"


def _headers() -> dict:
    return {"User-Agent": USER_AGENT}


def make_client(timeout: float = 10.0, **kwargs) -> httpx.Client:
    """Blocking client for :func:`steamauth.auth.verifier.verify`."""
    kwargs.setdefault("headers", _headers())
    return httpx.Client(timeout=timeout, **kwargs)


def make_async_client(timeout: float = 10.0, **kwargs) -> httpx.AsyncClient:
    """Suspending client for :func:`steamauth.auth.verifier.verify_async`."""
    kwargs.setdefault("headers", _headers())
    return httpx.AsyncClient(timeout=timeout, **kwargs)
