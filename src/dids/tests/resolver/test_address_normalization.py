import pytest

from src.dids.resolver.address import ipfs_path, normalize_address


@pytest.mark.parametrize(
    "doc_addr, expected",
    [
        ('data:"Qm123abc"', "Qm123abc"),
        ("  Qm123abc  ", "Qm123abc"),
        ("Qm123abc", "Qm123abc"),
        ('data: "Qm123abc" ', "Qm123abc"),
        ('"Qm123abc"', "Qm123abc"),
        ('data:" Qm123abc"\n', "Qm123abc"),
        ("data:Qm123abc", "Qm123abc"),
        ('Qm"12"3', "Qm123"),
        ("", ""),
    ],
)
def test_normalize_address(doc_addr, expected):
    assert normalize_address(doc_addr) == expected


def test_prefix_only_stripped_at_start():
    assert normalize_address("Qmdata:123") == "Qmdata:123"


def test_prefix_uncovered_by_trim_is_stripped():
    assert normalize_address('  data:"Qm1"') == "Qm1"


@pytest.mark.parametrize(
    "doc_addr",
    [
        'data:"Qm123abc"',
        ' "data:Qm1" ',
        "data:data:Qm1",
        '"  data:  "',
        "data:",
        '  " data: " data:x',
        "\tQm\t",
    ],
)
def test_normalize_is_idempotent(doc_addr):
    once = normalize_address(doc_addr)
    assert normalize_address(once) == once
    assert '"' not in once
    assert not once.startswith("data:")
    assert once == once.strip()


def test_ipfs_path():
    assert ipfs_path("Qm123") == "/ipfs/Qm123"
