from __future__ import annotations

import base64
import binascii
import time

from src.dids.resolver.errors import LedgerQueryFailed
from src.dids.resolver.transport import NodePool, error_message

RESOLVE_METHOD = "Resolve"

RECEIPT_FAILED = "FAILED"


class LedgerClientError(Exception):
    pass


class ViewGatewayClient:
    """
    Ledger client for a JSON view gateway deployed in front of BitXHub.

    BitXHub nodes themselves speak gRPC with protobuf transactions. This
    client targets a gateway that takes a plain JSON view request, runs the
    contract call read-only on the node and answers with the receipt::

        POST <gateway>/v1/view
        {"from", "to", "timestamp", "payload": {"method", "args": [{"type": "string", "value"}]}}
        -> {"status": "SUCCESS" | "FAILED", "ret": <base64>}

    Select it (or any class with the same constructor and
    ``invoke_bvm_contract``) with the ``BITXHUB_LEDGER_CLIENT`` setting.
    """

    def __init__(self, nodes, *, account: str = "", timeout: float | None = 10.0, session=None):
        self.pool = NodePool(nodes, timeout=timeout, session=session)
        self.account = account

    def invoke_bvm_contract(self, address: str, method: str, *args: str) -> bytes:
        tx = {
            "from": self.account,
            "to": address,
            "timestamp": time.time_ns(),
            "payload": {
                "method": method,
                "args": [{"type": "string", "value": arg} for arg in args],
            },
        }
        resp = self.pool.post("/v1/view", json=tx)
        if resp.status_code != 200:
            raise LedgerClientError(error_message(resp, "message", "error"))
        try:
            receipt = resp.json()
            ret = base64.b64decode(receipt.get("ret") or "", validate=True)
        except (ValueError, AttributeError, binascii.Error) as exc:
            raise LedgerClientError(f"invalid receipt: {exc}") from exc

        if receipt.get("status") == RECEIPT_FAILED:
            raise LedgerClientError(ret.decode("utf-8", "replace") or f"{method} failed")
        return ret


class RegistryLedger:
    """Queries the DID registry contract for the metadata of one identifier."""

    def __init__(self, client, contract_address: str, method: str = RESOLVE_METHOD):
        self.client = client
        self.contract_address = contract_address
        self.method = method

    def query(self, identifier: str) -> bytes:
        try:
            return self.client.invoke_bvm_contract(self.contract_address, self.method, identifier)
        except Exception as exc:
            raise LedgerQueryFailed(str(exc)) from exc
