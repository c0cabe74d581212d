"""Unit tests for the devnet signature scanner (aeharness.adapters.devnet.sophia)."""

from textwrap import dedent

import pytest

from aeharness.adapters.devnet.sophia import (
    SophiaSyntaxError,
    build_aci,
    check_brackets,
    parse_sophia_type,
    strip_comments,
)


def test_nft_aci(nft_artifact):
    """The bundled NFT contract scans to the expected interface."""
    aci = build_aci(nft_artifact.source, nft_artifact.filesystem)["contract"]
    functions = {f["name"]: f for f in aci["functions"]}

    assert aci["name"] == "NFT"
    assert list(functions) == [
        "init",
        "name",
        "symbol",
        "balance_of",
        "owner_of",
        "get_approved",
        "is_approved_for_all",
        "mint",
        "approve",
        "set_approval_for_all",
        "transfer_from",
        "safe_transfer_from",
        "burn",
    ]
    assert functions["init"]["returns"] == "NFT.state"
    assert functions["get_approved"]["returns"] == {"option": ["address"]}
    assert functions["mint"]["stateful"] is True
    assert functions["owner_of"]["stateful"] is False
    assert functions["safe_transfer_from"]["arguments"] == [
        {"name": "from", "type": "address"},
        {"name": "to", "type": "address"},
        {"name": "token_id", "type": "int"},
    ]


def test_private_functions_are_not_entrypoints(nft_artifact):
    """``function`` declarations stay out of the ACI."""
    names = {f["name"] for f in build_aci(nft_artifact.source, nft_artifact.filesystem)["contract"]["functions"]}
    assert "require_authorized" not in names
    assert "transfer" not in names


def test_interfaces_are_skipped():
    """An interface declared after the contract is not taken for the main contract."""
    source = dedent(
        """\
        contract Wallet =
            entrypoint balance() : int = 0

        contract interface Receiver =
            entrypoint receive : (int) => bool
        """
    )
    aci = build_aci(source)["contract"]
    assert aci["name"] == "Wallet"
    assert [f["name"] for f in aci["functions"]] == ["balance"]


def test_missing_include_is_a_syntax_error():
    """Includes must be present in the filesystem."""
    source = 'include "Lib.aes"\ncontract C =\n    entrypoint f() = 1\n'
    with pytest.raises(SophiaSyntaxError, match="Lib.aes"):
        build_aci(source, {})


def test_source_without_contract():
    """Interface-only sources cannot be compiled."""
    source = "contract interface I =\n    entrypoint f : () => int\n"
    with pytest.raises(SophiaSyntaxError, match="No contract"):
        build_aci(source)


def test_untyped_argument():
    """Entry-point arguments need annotations."""
    source = "contract C =\n    entrypoint f(x) = x\n"
    with pytest.raises(SophiaSyntaxError, match="type annotation"):
        build_aci(source)


def test_main_contract_wins():
    """``main contract`` is chosen over the last declared one."""
    source = dedent(
        """\
        main contract A =
            entrypoint a() : int = 1

        contract B =
            entrypoint b() : int = 2
        """
    )
    assert build_aci(source)["contract"]["name"] == "A"


@pytest.mark.parametrize(
    ("source", "match"),
    [("f(x", "Unclosed '\\('"), ("f(x))", "Unbalanced '\\)'"), ("[}", "Unbalanced")],
)
def test_check_brackets(source, match):
    """Imbalances are reported with their position."""
    with pytest.raises(SophiaSyntaxError, match=match):
        check_brackets(source)


def test_brackets_inside_strings_are_ignored():
    """String literals may contain any bracket."""
    check_brackets('abort("(")')


def test_strip_comments_keeps_line_numbers():
    """Block comments collapse to their newlines."""
    stripped = strip_comments("a /* x\ny */ b // c\nd")
    assert stripped.count("\n") == 2
    assert "x" not in stripped
    assert "c" not in stripped


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("int", "int"),
        ("unit", {"tuple": []}),
        ("option(address)", {"option": ["address"]}),
        ("map(int, map(address, bool))", {"map": ["int", {"map": ["address", "bool"]}]}),
        ("(int * string)", {"tuple": ["int", "string"]}),
        ("bytes(32)", {"bytes": 32}),
        ("state", "C.state"),
        ("Lib.t", "Lib.t"),
    ],
)
def test_parse_sophia_type(text, expected):
    """Source types translate to the ACI grammar."""
    assert parse_sophia_type(text, "C") == expected
