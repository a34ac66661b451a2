from .base import *  # noqa

SECRET_KEY = "django-insecure-test-key"
DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

BITXHUB_LEDGER_CLIENT = "src.dids.resolver.ledger.ViewGatewayClient"
BITXHUB_GATEWAYS = ["http://bitxhub.test:9091"]
IPFS_NODES = ["http://ipfs.test:5001"]
