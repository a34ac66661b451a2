import logging

import pytest
from django.core.exceptions import ImproperlyConfigured

from config import env as env_module


@pytest.fixture
def openbao(monkeypatch):
    """Enable OpenBao with a dev token; returns a setter for what the KV read yields."""
    monkeypatch.setattr(env_module, "OPENBAO_TOKEN", "dev-token")
    monkeypatch.delenv("RESOLVER_TEST_VALUE", raising=False)
    reads = []

    def serve(result):
        def read(path):
            reads.append(path)
            if isinstance(result, Exception):
                raise result
            return result

        monkeypatch.setattr(env_module, "bao_read_kv", read)
        return reads

    return serve


def test_environment_wins(monkeypatch, openbao):
    reads = openbao({"RESOLVER_TEST_VALUE": "from-bao"})
    monkeypatch.setenv("RESOLVER_TEST_VALUE", "from-env")

    assert env_module.env_get("RESOLVER_TEST_VALUE") == "from-env"
    assert reads == []


def test_openbao_fallback(openbao):
    reads = openbao({"RESOLVER_TEST_VALUE": "from-bao"})

    assert env_module.env_get("RESOLVER_TEST_VALUE") == "from-bao"
    assert reads == ["did-resolver"]


def test_kv_path_override(openbao):
    reads = openbao({"RESOLVER_TEST_VALUE": "from-bao"})

    env_module.env_get("RESOLVER_TEST_VALUE", kv_path="did-resolver/prod")
    assert reads == ["did-resolver/prod"]


def test_default_when_openbao_unreachable(openbao, caplog):
    openbao(ConnectionError("connection refused"))

    with caplog.at_level(logging.WARNING, logger="config.env"):
        assert env_module.env_get("RESOLVER_TEST_VALUE", default="fallback") == "fallback"
    assert caplog.records[0].setting == "RESOLVER_TEST_VALUE"
    assert caplog.records[0].err == "connection refused"


def test_default_when_key_missing_from_openbao(openbao):
    openbao({})

    assert env_module.env_get("RESOLVER_TEST_VALUE", default=3) == 3


def test_openbao_skipped_without_credentials(monkeypatch):
    monkeypatch.delenv("RESOLVER_TEST_VALUE", raising=False)
    monkeypatch.setattr(env_module, "OPENBAO_TOKEN", "")
    monkeypatch.setattr(env_module, "OPENBAO_ROLE_ID", "")
    monkeypatch.setattr(env_module, "bao_read_kv", lambda path: pytest.fail("OpenBao queried"))

    assert env_module.env_get("RESOLVER_TEST_VALUE", default="local") == "local"


def test_approle_credentials_enable_openbao(monkeypatch):
    monkeypatch.setattr(env_module, "OPENBAO_TOKEN", "")
    monkeypatch.setattr(env_module, "OPENBAO_ROLE_ID", "role")
    monkeypatch.setattr(env_module, "OPENBAO_SECRET_ID", "")
    assert not env_module.openbao_enabled()

    monkeypatch.setattr(env_module, "OPENBAO_SECRET_ID", "secret")
    assert env_module.openbao_enabled()


def test_missing_required_setting(openbao):
    openbao({})

    with pytest.raises(ImproperlyConfigured, match="RESOLVER_TEST_VALUE is not set"):
        env_module.env_get("RESOLVER_TEST_VALUE")
