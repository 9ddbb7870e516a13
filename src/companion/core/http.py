"""Shared httpx client factory for talking to the local inference server.

Local models can take a long time to answer, so clients built here default
to ``timeout=None`` and wait for the server.
"""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_USER_AGENT = "companion/0.1.0"


def make_httpx_client(**kwargs: Any) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` for the inference server.

    Accepts the same keyword arguments as ``httpx.AsyncClient``.
    A ``transport=None`` entry is dropped so httpx picks its default.
    """
    kwargs.setdefault("timeout", None)
    if kwargs.get("transport") is None:
        kwargs.pop("transport", None)
    headers = dict(kwargs.pop("headers", None) or {})
    headers.setdefault("User-Agent", DEFAULT_USER_AGENT)
    kwargs["headers"] = headers
    return httpx.AsyncClient(**kwargs)
