from __future__ import annotations

from src.dids.resolver.address import ipfs_path
from src.dids.resolver.errors import ContentFetchFailed
from src.dids.resolver.transport import NodePool, error_message


class IPFSError(Exception):
    pass


class IPFSClient:
    """Reads content through the IPFS HTTP API (``/api/v0/cat``)."""

    def __init__(self, nodes, *, timeout: float | None = 30.0, session=None):
        self.pool = NodePool(nodes, timeout=timeout, session=session)

    def get(self, path: str) -> bytes:
        resp = self.pool.post("/api/v0/cat", params={"arg": path})
        if resp.status_code != 200:
            raise IPFSError(error_message(resp, "Message"))
        return resp.content


class ContentStore:
    def __init__(self, client):
        self.client = client

    def fetch(self, address: str) -> bytes:
        try:
            return self.client.get(ipfs_path(address))
        except Exception as exc:
            raise ContentFetchFailed(str(exc)) from exc
