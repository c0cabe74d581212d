"""Unit tests for the harness error taxonomy (aeharness.domain.errors)."""

import pytest

from aeharness.domain.errors import (
    ArgumentTypeError,
    BindError,
    CallError,
    CompileError,
    DeployError,
    HarnessError,
    LoadError,
    NotDeployedError,
    TransportError,
    UnknownEntrypointError,
)


@pytest.mark.parametrize(
    "error",
    [
        LoadError("contracts/Missing.aes"),
        CompileError("NFT.aes", ["Unbound variable foo"]),
        TransportError("http://localhost:3001/v3/status", "timed out"),
        DeployError("NFT", "Name must not be empty"),
        BindError("ct_abc", "no contract deployed at this address"),
        NotDeployedError("NFT"),
        CallError("mint", "Already minted"),
        UnknownEntrypointError("NFT", "frobnicate", ["mint"]),
        ArgumentTypeError("mint", "missing argument 'to'"),
    ],
)
def test_every_error_is_a_harness_error(error):
    """Callers can catch every harness failure with one except clause."""
    assert isinstance(error, HarnessError)


def test_load_error_names_path_and_reason():
    """The message carries the path and the optional reason."""
    err = LoadError("contracts/Missing.aes", "file not found")
    assert err.path == "contracts/Missing.aes"
    assert str(err) == "Cannot load contract source 'contracts/Missing.aes': file not found"
    assert str(LoadError("x.aes")) == "Cannot load contract source 'x.aes'"


def test_compile_error_joins_messages():
    """All compiler messages are kept and joined in the text."""
    err = CompileError("NFT.aes", ["first", "second"])
    assert err.errors == ["first", "second"]
    assert str(err) == "Compilation of NFT.aes failed: first; second"
    assert "unknown error" in str(CompileError("NFT.aes", []))


def test_transport_error_includes_status_when_known():
    """The HTTP status is shown when the service answered."""
    err = TransportError("http://node/v3/status", "boom", status_code=500)
    assert err.status_code == 500
    assert str(err) == "Request to http://node/v3/status failed (HTTP 500): boom"
    assert "(HTTP" not in str(TransportError("http://node", "timed out"))


def test_call_error_keeps_revert_message_verbatim():
    """Scenario assertions match substrings of `message`."""
    err = CallError("mint", "Only owner can mint")
    assert err.entrypoint == "mint"
    assert err.message == "Only owner can mint"
    assert "Only owner can mint" in str(err)


def test_unknown_entrypoint_error_is_an_attribute_error():
    """`getattr(instance.methods, name, default)` keeps working."""
    err = UnknownEntrypointError("NFT", "frobnicate", ["symbol", "mint"])
    assert isinstance(err, AttributeError)
    assert err.available == ["mint", "symbol"]
    assert "Available: mint, symbol" in str(err)


def test_argument_type_error_is_a_type_error():
    """Bad arguments fail like a wrong Python call would."""
    err = ArgumentTypeError("mint", "missing argument 'to'")
    assert isinstance(err, TypeError)
    assert err.reason == "missing argument 'to'"


def test_not_deployed_and_bind_errors_render_context():
    """The contract name or address appears in the message."""
    assert "NFT" in str(NotDeployedError("NFT"))
    err = BindError("ct_abc", "holds a different contract")
    assert (err.address, err.reason) == ("ct_abc", "holds a different contract")
    assert str(err) == "Cannot bind to ct_abc: holds a different contract"
