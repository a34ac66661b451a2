from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)


class NodePool:
    """
    A list of equivalent HTTP endpoints sharing one ``requests.Session``.
    Requests go to the first node; connection errors and timeouts move on to
    the next one. Any HTTP answer, error statuses included, is returned.
    """

    def __init__(self, nodes, *, timeout: float | None = None, session: requests.Session | None = None):
        self.nodes = [n.rstrip("/") for n in nodes if n and n.strip()]
        if not self.nodes:
            raise ValueError("at least one node address is required")
        self.timeout = timeout
        self.session = session or requests.Session()

    def post(self, path: str, **kwargs) -> requests.Response:
        last_exc: Exception | None = None
        for node in self.nodes:
            try:
                return self.session.post(f"{node}{path}", timeout=self.timeout, **kwargs)
            except (requests.ConnectionError, requests.Timeout) as exc:
                logger.warning("node unreachable", extra={"node": node, "err": str(exc)})
                last_exc = exc
        raise last_exc


def error_message(resp: requests.Response, *keys: str) -> str:
    """Best effort message out of an error response body."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in keys:
            if body.get(key):
                return str(body[key])
    text = (resp.text or "").strip()
    return text or f"HTTP {resp.status_code}"
