import logging
from functools import lru_cache

import environ
import hvac
from django.core.exceptions import ImproperlyConfigured

log = logging.getLogger(__name__)

env = environ.Env()

BASE_DIR = environ.Path(__file__) - 2
APPS_DIR = BASE_DIR.path("src")


# OpenBao holds the deployment secrets; unset credentials mean environment only
OPENBAO_ADDR = env("OPENBAO_ADDR", default="http://127.0.0.1:8200")
OPENBAO_TOKEN = env("OPENBAO_TOKEN", default="")
OPENBAO_ROLE_ID = env("OPENBAO_ROLE_ID", default="")
OPENBAO_SECRET_ID = env("OPENBAO_SECRET_ID", default="")
OPENBAO_KV_MOUNT = env("OPENBAO_KV_MOUNT", default="secret")
OPENBAO_KV_PATH = env("OPENBAO_KV_PATH", default="did-resolver")


def openbao_enabled() -> bool:
    return bool(OPENBAO_TOKEN or (OPENBAO_ROLE_ID and OPENBAO_SECRET_ID))


def _bao_login() -> hvac.Client:
    c = hvac.Client(url=OPENBAO_ADDR, timeout=5)
    if OPENBAO_TOKEN:
        c.token = OPENBAO_TOKEN
    else:
        resp = c.auth.approle.login(role_id=OPENBAO_ROLE_ID, secret_id=OPENBAO_SECRET_ID)
        c.token = resp["auth"]["client_token"]
    return c


@lru_cache(maxsize=8)
def bao_read_kv(path: str) -> dict:
    """KV v2 secret at {OPENBAO_KV_MOUNT}/{path}, read once per process."""
    resp = _bao_login().secrets.kv.v2.read_secret_version(mount_point=OPENBAO_KV_MOUNT, path=path)
    return resp["data"]["data"] or {}


def env_get(name: str, default=environ.Env.NOTSET, *, kv_path: str | None = None):
    """
    Setting lookup for deployments: the environment (or .env) first, then the
    OpenBao KV secret when credentials are configured, then ``default``.

    An unreachable OpenBao is logged and treated as a miss. Without a
    ``default`` a miss raises ImproperlyConfigured.
    """
    val = env(name, default=None)
    if val is not None:
        return val

    path = kv_path or OPENBAO_KV_PATH
    if openbao_enabled():
        try:
            data = bao_read_kv(path)
        except Exception as exc:
            log.warning(
                "OpenBao lookup failed",
                extra={"setting": name, "path": f"{OPENBAO_KV_MOUNT}/{path}", "err": str(exc)},
            )
        else:
            if name in data:
                return data[name]

    if default is environ.Env.NOTSET:
        raise ImproperlyConfigured(f"{name} is not set in the environment or in OpenBao {OPENBAO_KV_MOUNT}/{path}")
    return default
