import pytest
import requests

from src.dids.resolver.errors import ContentFetchFailed
from src.dids.resolver.ipfs import ContentStore, IPFSClient, IPFSError
from src.dids.tests.fakes import FakeIPFSClient, StubResponse, StubSession


def test_get_cats_path():
    session = StubSession(StubResponse(content=b'{"id": "did:bitxhub:x"}'))
    client = IPFSClient(["http://ipfs1:5001"], timeout=7, session=session)

    assert client.get("/ipfs/Qm123") == b'{"id": "did:bitxhub:x"}'
    url, kwargs = session.calls[0]
    assert url == "http://ipfs1:5001/api/v0/cat"
    assert kwargs["params"] == {"arg": "/ipfs/Qm123"}
    assert kwargs["timeout"] == 7


def test_api_error_message():
    body = {"Message": "invalid path \"/ipfs/nope\": invalid cid", "Code": 0, "Type": "error"}
    session = StubSession(StubResponse(status_code=500, json_body=body))
    client = IPFSClient(["http://ipfs1:5001"], session=session)
    with pytest.raises(IPFSError, match="invalid cid"):
        client.get("/ipfs/nope")


def test_non_json_error_body():
    session = StubSession(StubResponse(status_code=502, content=b"Bad Gateway"))
    client = IPFSClient(["http://ipfs1:5001"], session=session)
    with pytest.raises(IPFSError, match="Bad Gateway"):
        client.get("/ipfs/Qm1")


def test_empty_error_body():
    session = StubSession(StubResponse(status_code=504))
    client = IPFSClient(["http://ipfs1:5001"], session=session)
    with pytest.raises(IPFSError, match="HTTP 504"):
        client.get("/ipfs/Qm1")


def test_fails_over_on_timeout():
    session = StubSession(requests.Timeout("read timed out"), StubResponse(content=b"{}"))
    client = IPFSClient(["http://ipfs1:5001", "http://ipfs2:5001"], session=session)

    assert client.get("/ipfs/Qm1") == b"{}"
    assert session.calls[1][0] == "http://ipfs2:5001/api/v0/cat"


def test_error_status_is_not_retried_on_other_nodes():
    session = StubSession(StubResponse(status_code=500, json_body={"Message": "not found"}))
    client = IPFSClient(["http://ipfs1:5001", "http://ipfs2:5001"], session=session)
    with pytest.raises(IPFSError):
        client.get("/ipfs/Qm1")
    assert len(session.calls) == 1


def test_content_store_builds_ipfs_path():
    client = FakeIPFSClient(content=b"doc")
    assert ContentStore(client).fetch("Qm123") == b"doc"
    assert client.paths == ["/ipfs/Qm123"]


def test_content_store_wraps_errors():
    store = ContentStore(FakeIPFSClient(error=IPFSError("context deadline exceeded")))
    with pytest.raises(ContentFetchFailed) as exc_info:
        store.fetch("Qm123")
    assert exc_info.value.to_payload() == {"code": -10002, "message": "context deadline exceeded"}
