import json

import pytest

from src.dids.resolver.ipfs import ContentStore
from src.dids.resolver.ledger import RegistryLedger
from src.dids.resolver.metadata import RegistryMetadata, encode_metadata
from src.dids.resolver.services import DidResolver
from src.dids.tests.fakes import REGISTRY_ADDR, FakeIPFSClient, FakeLedgerClient


@pytest.fixture
def sample_document():
    return {
        "id": "did:bitxhub:example",
        "type": "user",
        "created": "2021-06-01T08:00:00Z",
        "updated": "2021-06-02T09:30:00Z",
        "controller": "did:bitxhub:example",
        "publicKey": [
            {
                "id": "KEY#1",
                "type": "Secp256k1",
                "publicKeyPem": "-----BEGIN PUBLIC KEY-----\nMFYwEAYHKoZIzj0CAQYFK4EEAAoDQgAE\n-----END PUBLIC KEY-----",
            }
        ],
        "authentication": [{"publicKey": ["KEY#1"]}],
        "service": [
            {"id": "did:bitxhub:example#hub", "type": "IdentityHub", "serviceEndpoint": {"uri": "https://hub.example.com"}}
        ],
    }


@pytest.fixture
def registry_info():
    return RegistryMetadata(
        method="did:bitxhub",
        owner="did:bitxhub:relayroot:0x12",
        doc_addr='data:"Qm123"',
        doc_hash=bytes.fromhex("9f86d081884c7d659a2feaa0c55ad015"),
        status="normal",
    )


@pytest.fixture
def ledger_client(registry_info):
    return FakeLedgerClient(ret=encode_metadata(registry_info))


@pytest.fixture
def ipfs_client(sample_document):
    return FakeIPFSClient(content=json.dumps(sample_document).encode())


@pytest.fixture
def resolver(ledger_client, ipfs_client):
    return DidResolver(
        ledger=RegistryLedger(ledger_client, REGISTRY_ADDR),
        store=ContentStore(ipfs_client),
    )
