DATA_PREFIX = "data:"
IPFS_NAMESPACE = "/ipfs/"


def _clean(doc_addr: str) -> str:
    if doc_addr.startswith(DATA_PREFIX):
        doc_addr = doc_addr[len(DATA_PREFIX):]
    # quotes go before the trim so they cannot shield surrounding whitespace
    return doc_addr.replace('"', "").strip()


def normalize_address(doc_addr: str) -> str:
    """
    Turn the registry ``DocAddr`` (e.g. ``data:"Qm123"``) into the bare
    content address (``Qm123``). Never fails; clean input comes back as is.

    The cleanup is repeated until nothing changes, so a prefix uncovered by
    the trim (``' data:Qm1'``) is removed as well and the result is stable.
    """
    current = doc_addr or ""
    while True:
        cleaned = _clean(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def ipfs_path(address: str) -> str:
    return f"{IPFS_NAMESPACE}{address}"
