"""Contract interface (ACI) type model.

The compiler describes every contract with an ACI: the contract name and one
signature per entry point, whose argument and return types use a small JSON
grammar::

    "int" | "bool" | "string" | "address" | "hash" | "bits"
    {"bytes": 32}
    {"option": [T]} | {"list": [T]} | {"map": [K, V]} | {"tuple": [T, ...]}
    "Contract.named_type" | {"Contract.named_type": [T, ...]}

`parse_type` turns that grammar into a `TypeSpec`. A `TypeSpec` knows how to

- validate a Python argument (`validate`),
- render it as a source-language literal for the HTTP compiler (`to_literal`),
- convert it to and from the compiler's JSON value shape (`to_json`,
  `from_json`).

Python mapping: ``option`` is the value or ``None``, tuples are `tuple`,
maps are `dict`, byte arrays are `bytes` and the unit type (the empty tuple)
is ``None``. Named record/variant types are passed through unchanged.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from aeharness.domain import addresses
from aeharness.domain.errors import ArgumentTypeError, UnknownEntrypointError

PRIMITIVES = frozenset({"int", "bool", "string", "address", "hash", "bits", "unit"})
CONTAINERS = frozenset({"option", "list", "map", "tuple"})
HASH_SIZE = 32


class TypeMismatch(ValueError):
    """Raised when a value does not fit a `TypeSpec`."""


# ============================================================================
#                               TypeSpec
# ============================================================================


@dataclass(frozen=True)
class TypeSpec:
    """One node of a parsed ACI type.

    Attributes:
        kind: A primitive (``int``, ``string``...), a container (``option``,
            ``list``, ``map``, ``tuple``), ``bytes`` or ``named``.
        params: Element types for containers and parameterized named types.
        name: The qualified name for ``named`` types.
        size: Byte length for ``bytes``.
    """

    kind: str
    params: tuple[TypeSpec, ...] = ()
    name: str | None = None
    size: int | None = None

    # --- Display ---

    def render(self) -> str:
        """Render the type in source-language syntax, e.g. ``option(address)``."""
        match self.kind:
            case "bytes":
                return f"bytes({self.size})"
            case "tuple":
                return "(" + " * ".join(p.render() for p in self.params) + ")"
            case "named":
                if self.params:
                    inner = ", ".join(p.render() for p in self.params)
                    return f"{self.name}({inner})"
                return str(self.name)
            case _ if self.params:
                inner = ", ".join(p.render() for p in self.params)
                return f"{self.kind}({inner})"
            case _:
                return self.kind

    def __str__(self) -> str:
        return self.render()

    # --- Validation ---

    def validate(self, value: Any) -> Any:  # pylint: disable=too-many-return-statements,too-many-branches
        """Check ``value`` against this type and return its normalized form.

        Lists become `list`, tuples become `tuple`, maps become `dict`.

        Raises:
            TypeMismatch: If the value does not fit.
        """
        match self.kind:
            case "int":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise self._mismatch(value)
                return value
            case "bool":
                if not isinstance(value, bool):
                    raise self._mismatch(value)
                return value
            case "string":
                if not isinstance(value, str):
                    raise self._mismatch(value)
                return value
            case "address":
                if not addresses.is_address(value):
                    raise self._mismatch(value)
                if addresses.prefix_of(value) != addresses.ACCOUNT_PREFIX:
                    raise TypeMismatch(
                        f"expected an ak_ address, got {value!r} "
                        "(convert contract addresses with to_account_address)"
                    )
                return value
            case "hash" | "bytes":
                size = HASH_SIZE if self.kind == "hash" else self.size
                if not isinstance(value, (bytes, bytearray)):
                    raise self._mismatch(value)
                if size is not None and len(value) != size:
                    raise TypeMismatch(f"expected {size} bytes, got {len(value)}")
                return bytes(value)
            case "bits":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise self._mismatch(value)
                return value
            case "unit":
                if value not in (None, ()):
                    raise self._mismatch(value)
                return None
            case "option":
                return None if value is None else self.params[0].validate(value)
            case "list":
                if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                    raise self._mismatch(value)
                return [self.params[0].validate(v) for v in value]
            case "tuple":
                if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                    raise self._mismatch(value)
                if len(value) != len(self.params):
                    raise TypeMismatch(
                        f"expected a {len(self.params)}-tuple, got {len(value)} items"
                    )
                return tuple(p.validate(v) for p, v in zip(self.params, value))
            case "map":
                if not isinstance(value, Mapping):
                    raise self._mismatch(value)
                key_type, value_type = self.params
                return {
                    _hashable(key_type.validate(k)): value_type.validate(v)
                    for k, v in value.items()
                }
            case _:
                return value

    def _mismatch(self, value: Any) -> TypeMismatch:
        return TypeMismatch(
            f"expected {self.render()}, got {type(value).__name__} {value!r}"
        )

    # --- Source literals (HTTP compiler calldata) ---

    def to_literal(self, value: Any) -> str:  # pylint: disable=too-many-return-statements
        """Render an already-validated value as a source-language literal."""
        match self.kind:
            case "int" | "bits":
                return str(value)
            case "bool":
                return "true" if value else "false"
            case "string":
                return json.dumps(value, ensure_ascii=False)
            case "address":
                return value
            case "hash" | "bytes":
                return "#" + value.hex()
            case "unit":
                return "()"
            case "option":
                if value is None:
                    return "None"
                return f"Some({self.params[0].to_literal(value)})"
            case "list":
                return "[" + ", ".join(self.params[0].to_literal(v) for v in value) + "]"
            case "tuple":
                return "(" + ", ".join(p.to_literal(v) for p, v in zip(self.params, value)) + ")"
            case "map":
                key_type, value_type = self.params
                items = (
                    f"[{key_type.to_literal(k)}] = {value_type.to_literal(v)}"
                    for k, v in value.items()
                )
                return "{" + ", ".join(items) + "}"
            case _:
                if isinstance(value, str):
                    return value
                raise TypeMismatch(
                    f"cannot render a literal of named type {self.name} from {value!r}"
                )

    # --- Compiler JSON values ---

    def to_json(self, value: Any) -> Any:  # pylint: disable=too-many-return-statements
        """Convert a validated Python value into the compiler's JSON value shape."""
        match self.kind:
            case "hash" | "bytes":
                return "#" + value.hex()
            case "unit":
                return []
            case "option":
                if value is None:
                    return "None"
                return {"Some": [self.params[0].to_json(value)]}
            case "list":
                return [self.params[0].to_json(v) for v in value]
            case "tuple":
                return [p.to_json(v) for p, v in zip(self.params, value)]
            case "map":
                key_type, value_type = self.params
                return [[key_type.to_json(k), value_type.to_json(v)] for k, v in value.items()]
            case _:
                return value

    def from_json(self, data: Any) -> Any:  # pylint: disable=too-many-return-statements
        """Convert a compiler JSON value into its Python form.

        Raises:
            TypeMismatch: If ``data`` does not have the expected shape.
        """
        match self.kind:
            case "hash" | "bytes":
                if not isinstance(data, str) or not data.startswith("#"):
                    raise self._mismatch(data)
                return bytes.fromhex(data[1:])
            case "unit":
                return None
            case "option":
                if data == "None" or data is None:
                    return None
                if isinstance(data, Mapping) and "Some" in data:
                    (inner,) = data["Some"]
                    return self.params[0].from_json(inner)
                raise self._mismatch(data)
            case "list":
                if not isinstance(data, list):
                    raise self._mismatch(data)
                return [self.params[0].from_json(v) for v in data]
            case "tuple":
                if not isinstance(data, list) or len(data) != len(self.params):
                    raise self._mismatch(data)
                return tuple(p.from_json(v) for p, v in zip(self.params, data))
            case "map":
                if not isinstance(data, list):
                    raise self._mismatch(data)
                key_type, value_type = self.params
                return {
                    _hashable(key_type.from_json(k)): value_type.from_json(v)
                    for k, v in data
                }
            case "named":
                return data
            case _:
                return self.validate(data)


def _hashable(value: Any) -> Any:
    return tuple(value) if isinstance(value, list) else value


def parse_type(spec: Any) -> TypeSpec:
    """Parse one ACI type expression into a `TypeSpec`.

    Raises:
        ValueError: If ``spec`` is not a valid ACI type expression.
    """
    if isinstance(spec, str):
        if spec in PRIMITIVES:
            return TypeSpec(kind=spec)
        return TypeSpec(kind="named", name=spec)

    if isinstance(spec, Mapping) and len(spec) == 1:
        ((key, value),) = spec.items()
        if key == "bytes":
            return TypeSpec(kind="bytes", size=value if isinstance(value, int) else None)
        if not isinstance(value, list):
            raise ValueError(f"Invalid ACI type parameters: {spec!r}")
        params = tuple(parse_type(p) for p in value)
        if key == "tuple":
            return TypeSpec(kind="unit") if not params else TypeSpec(kind="tuple", params=params)
        if key in CONTAINERS:
            expected = 2 if key == "map" else 1
            if len(params) != expected:
                raise ValueError(f"{key} takes {expected} type parameter(s): {spec!r}")
            return TypeSpec(kind=key, params=params)
        return TypeSpec(kind="named", name=key, params=params)

    raise ValueError(f"Invalid ACI type: {spec!r}")


# ============================================================================
#                         Entry points and interfaces
# ============================================================================


@dataclass(frozen=True)
class Argument:
    """A named, typed entry-point argument."""

    name: str
    type: TypeSpec


@dataclass(frozen=True)
class Entrypoint:
    """Signature of one contract entry point."""

    name: str
    arguments: tuple[Argument, ...]
    returns: TypeSpec
    stateful: bool = False
    payable: bool = False

    @classmethod
    def from_aci(cls, function: Mapping[str, Any]) -> Entrypoint:
        """Build an entry point from one ACI ``functions`` item."""
        return cls(
            name=function["name"],
            arguments=tuple(
                Argument(name=a.get("name", f"arg{i}"), type=parse_type(a["type"]))
                for i, a in enumerate(function.get("arguments", []))
            ),
            returns=parse_type(function.get("returns", {"tuple": []})),
            stateful=bool(function.get("stateful", False)),
            payable=bool(function.get("payable", False)),
        )

    @property
    def signature(self) -> str:
        """Human-readable signature, e.g. ``mint(to: address, token_id: int) : unit``."""
        args = ", ".join(f"{a.name}: {a.type}" for a in self.arguments)
        prefix = "stateful " if self.stateful else ""
        return f"{prefix}{self.name}({args}) : {self.returns}"

    def bind_arguments(
        self, args: Sequence[Any], kwargs: Mapping[str, Any] | None = None
    ) -> tuple[Any, ...]:
        """Match positional and keyword arguments to the signature and validate them.

        Returns:
            tuple: The validated arguments in declaration order.

        Raises:
            ArgumentTypeError: On wrong arity, unknown keywords or type mismatches.
        """
        kwargs = dict(kwargs or {})
        if len(args) > len(self.arguments):
            raise ArgumentTypeError(
                self.name,
                f"expected at most {len(self.arguments)} arguments, got {len(args)}",
            )
        values: list[Any] = list(args)
        for argument in self.arguments[len(args) :]:
            if argument.name not in kwargs:
                raise ArgumentTypeError(self.name, f"missing argument '{argument.name}'")
            values.append(kwargs.pop(argument.name))
        if kwargs:
            raise ArgumentTypeError(
                self.name, f"unexpected keyword arguments: {', '.join(sorted(kwargs))}"
            )

        bound = []
        for argument, value in zip(self.arguments, values):
            try:
                bound.append(argument.type.validate(value))
            except TypeMismatch as e:
                raise ArgumentTypeError(self.name, f"{argument.name}: {e}") from e
        return tuple(bound)


@dataclass(frozen=True)
class ContractInterface:
    """The fixed set of entry points a compiled contract exposes."""

    name: str
    entrypoints: Mapping[str, Entrypoint]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entrypoints", MappingProxyType(dict(self.entrypoints)))

    @classmethod
    def from_aci(cls, aci: Any) -> ContractInterface:
        """Parse an ACI document.

        Accepts a single ``{"contract": {...}}`` object or a list of them (as
        returned for sources that declare interfaces); in the latter case the
        main contract is used.

        Raises:
            ValueError: If no contract description is found.
        """
        candidates = aci if isinstance(aci, list) else [aci]
        contracts = [c["contract"] for c in candidates if isinstance(c, Mapping) and "contract" in c]
        if not contracts:
            raise ValueError("ACI does not describe a contract")
        main = next(
            (c for c in contracts if c.get("kind") == "contract_main"),
            next((c for c in reversed(contracts) if c.get("kind") != "contract_interface"), contracts[-1]),
        )
        entrypoints = {f["name"]: Entrypoint.from_aci(f) for f in main.get("functions", [])}
        # contracts without a declared constructor get an implicit one without arguments
        entrypoints.setdefault(
            "init", Entrypoint(name="init", arguments=(), returns=TypeSpec(kind="unit"))
        )
        return cls(name=main["name"], entrypoints=entrypoints, raw=main)

    @property
    def init(self) -> Entrypoint:
        """The constructor signature (implicit and argument-less if undeclared)."""
        return self.entrypoints["init"]

    def entrypoint(self, name: str) -> Entrypoint:
        """Return the entry point called ``name``.

        Raises:
            UnknownEntrypointError: If the contract has no such entry point.
        """
        try:
            return self.entrypoints[name]
        except KeyError:
            raise UnknownEntrypointError(self.name, name, self.callable_names) from None

    @property
    def callable_names(self) -> list[str]:
        """Names of the entry points callable after deployment (``init`` excluded)."""
        return [n for n in self.entrypoints if n != "init"]
