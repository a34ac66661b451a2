from config.env import env

# dotted path of the ledger client class; no default, the transport depends on the deployment
# e.g. "src.dids.resolver.ledger.ViewGatewayClient" for a JSON view gateway
BITXHUB_LEDGER_CLIENT = env("BITXHUB_LEDGER_CLIENT", default="")
# endpoints handed to the ledger client, tried in order
BITXHUB_GATEWAYS = env.list("BITXHUB_GATEWAYS", default=["http://127.0.0.1:9091"])
# account the view requests are sent from
BITXHUB_ACCOUNT = env("BITXHUB_ACCOUNT", default="")
BITXHUB_TIMEOUT = env.float("BITXHUB_TIMEOUT", default=10.0)  # seconds

# built-in DID registry contract of BitXHub
DID_REGISTRY_CONTRACT_ADDR = env(
    "DID_REGISTRY_CONTRACT_ADDR",
    default="0x0000000000000000000000000000000000000012",
)
DID_REGISTRY_RESOLVE_METHOD = "Resolve"

# IPFS HTTP API nodes, tried in order
IPFS_NODES = env.list("IPFS_NODES", default=["http://127.0.0.1:5001"])
IPFS_TIMEOUT = env.float("IPFS_TIMEOUT", default=30.0)  # seconds
