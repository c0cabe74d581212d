"""Unit tests for DevnetCompiler."""

import pytest

from aeharness.adapters.devnet import codec
from aeharness.adapters.devnet.compiler import DevnetCompiler
from aeharness.domain import addresses
from aeharness.domain.errors import CompileError
from aeharness.domain.value_objects import CallInfo, ContractArtifact

OWNER = addresses.encode("ak", bytes(range(32)))


def _info(return_type: str, value) -> CallInfo:
    return CallInfo(
        return_type=return_type,
        return_value=codec.encode_blob(value),
        caller=OWNER,
        contract="ct_x",
    )


@pytest.fixture
def compiler() -> DevnetCompiler:
    """A devnet compiler."""
    return DevnetCompiler()


def test_compile_nft(compiler, nft_artifact):
    """Compiling yields cb_ bytecode and the NFT interface."""
    compiled = compiler.compile(nft_artifact)
    assert compiled.bytecode.startswith("cb_")
    assert compiled.name == "NFT"
    assert "safe_transfer_from" in compiled.aci.callable_names
    assert [a.name for a in compiled.aci.init.arguments] == ["name", "symbol"]


def test_compile_error_names_the_artifact(compiler):
    """Scanner failures surface as CompileError."""
    with pytest.raises(CompileError, match="<inline source>"):
        compiler.compile(ContractArtifact(source="contract C =\n    entrypoint f(x) = x\n"))


def test_validate_bytecode(compiler, nft_artifact, receiver_artifact, counter_artifact):
    """Only bytecode of the same contract and source validates."""
    nft = compiler.compile(nft_artifact)
    assert compiler.validate_bytecode(nft, compiler.compile(nft_artifact).bytecode)
    assert not compiler.validate_bytecode(nft, compiler.compile(receiver_artifact).bytecode)
    assert not compiler.validate_bytecode(nft, compiler.compile(counter_artifact).bytecode)
    assert not compiler.validate_bytecode(nft, "cb_garbage")


def test_validate_bytecode_tracks_source_changes(compiler, nft_artifact):
    """An edited source of the same contract does not validate."""
    nft = compiler.compile(nft_artifact)
    edited = ContractArtifact(
        source=nft_artifact.source + "\n// edited\n", filesystem=nft_artifact.filesystem
    )
    assert not compiler.validate_bytecode(nft, compiler.compile(edited).bytecode)


def test_calldata_uses_json_values(compiler, nft_artifact):
    """Arguments are encoded in the compiler's JSON value shape."""
    nft = compiler.compile(nft_artifact)
    calldata = compiler.encode_calldata(nft, "mint", (OWNER, 3))
    assert codec.decode_calldata(calldata) == ("mint", [OWNER, 3])


def test_decode_results(compiler, nft_artifact):
    """Ok results decode with the return type; reverts become their message."""
    nft = compiler.compile(nft_artifact)
    assert compiler.decode_call_result(nft, "get_approved", _info("ok", {"Some": [OWNER]})) == OWNER
    assert compiler.decode_call_result(nft, "get_approved", _info("ok", "None")) is None
    assert compiler.decode_call_result(nft, "mint", _info("revert", "Already minted")) == (
        "Already minted"
    )


def test_decode_result_of_wrong_shape(compiler, nft_artifact):
    """A result that does not fit the return type is a CompileError."""
    nft = compiler.compile(nft_artifact)
    with pytest.raises(CompileError, match="balance_of"):
        compiler.decode_call_result(nft, "balance_of", _info("ok", "many"))
