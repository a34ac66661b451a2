import json

import pytest

from src.dids.resolver import services
from src.dids.resolver.ipfs import IPFSError
from src.dids.resolver.ledger import LedgerClientError
from src.dids.tests.fakes import FakeIPFSClient, FakeLedgerClient, linked_info_stream


@pytest.fixture
def use_resolver(monkeypatch):
    def _use(resolver):
        monkeypatch.setattr(services, "get_resolver", lambda: resolver)
        return resolver

    return _use


def test_returns_document(client, use_resolver, resolver, sample_document):
    use_resolver(resolver)

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 200
    assert response.json() == sample_document


def test_ledger_failure_body(client, use_resolver, resolver):
    resolver.ledger.client = FakeLedgerClient(error=LedgerClientError("connection refused"))
    use_resolver(resolver)

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 200
    assert response.json() == {"code": -10000, "message": "connection refused"}


def test_metadata_failure_body(client, use_resolver, resolver):
    resolver.ledger.client = FakeLedgerClient(ret=b"")
    use_resolver(resolver)

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 200
    assert response.json()["code"] == -10001


def test_fetch_failure_body(client, use_resolver, resolver):
    resolver.store.client = FakeIPFSClient(error=IPFSError("no link named \"Qm123\""))
    use_resolver(resolver)

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 200
    assert response.json() == {"code": -10002, "message": 'no link named "Qm123"'}


def test_document_failure_body(client, use_resolver, resolver):
    resolver.store.client = FakeIPFSClient(content=json.dumps({"publicKey": "KEY#1"}).encode())
    use_resolver(resolver)

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == -10003
    assert set(body) == {"code", "message"}


def test_unexpected_error_is_a_500(client, use_resolver):
    class Broken:
        def resolve(self, did):
            raise RuntimeError("boom")

    use_resolver(Broken())

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"


def test_deeply_nested_document_body(client, use_resolver, resolver):
    nested = b"[" * 100000 + b"]" * 100000
    resolver.store.client = FakeIPFSClient(content=b'{"id": "did:bitxhub:example", "service": ' + nested + b"}")
    use_resolver(resolver)

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 200
    assert response.json() == {"code": -10003, "message": "exceeded max depth"}


def test_deeply_nested_registry_record(client, use_resolver, resolver):
    resolver.ledger.client = FakeLedgerClient(ret=linked_info_stream(5000))
    use_resolver(resolver)

    response = client.get("/1.0/identifiers/did:bitxhub:example")

    assert response.status_code == 200
    assert response.json() == {"code": -10001, "message": "gob decode err: invalid nesting depth"}
