"""Signature extraction for Sophia sources.

The devnet compiler does not generate code; it only needs the interface a
real compiler would report. This module scans a source for its contract
declarations and entry-point signatures and renders them as an ACI document
in the same JSON shape the compiler service returns.

What is checked:
- comments are stripped, brackets must balance;
- every non-stdlib ``include`` must be present in the artifact filesystem;
- at least one concrete (non-interface) contract must be declared;
- every entry-point argument must carry a type annotation.

Entry points without a return annotation are reported as returning ``unit``
(``init`` as returning the contract state).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from aeharness.adapters.contract_loader import STDLIB_INCLUDES, find_includes

_LINE_COMMENT = re.compile(r"//[^\n]*")
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_CONTRACT_DECL = re.compile(
    r"^(?P<main>main\s+)?(?P<payable>payable\s+)?contract\s+"
    r"(?P<interface>interface\s+)?(?P<name>[A-Z]\w*)\s*(?::[^=\n]*)?=",
    re.MULTILINE,
)
_ENTRYPOINT_DECL = re.compile(
    r"^[ \t]+(?P<modifiers>(?:(?:payable|stateful)\s+)*)entrypoint\s+(?P<name>[a-z_]\w*)\s*\(",
    re.MULTILINE,
)
_BUILTIN_TYPES = {"int", "bool", "string", "address", "hash", "bits", "signature", "char"}
_PAIRS = {"(": ")", "[": "]", "{": "}"}


class SophiaSyntaxError(ValueError):
    """Raised when a source cannot be scanned for signatures."""


@dataclass
class ScannedContract:
    """Contract declaration found in a source."""

    name: str
    is_main: bool
    is_interface: bool
    payable: bool
    body: str = field(repr=False)


# ============================================================================
#                               Public API
# ============================================================================


def strip_comments(source: str) -> str:
    """Remove ``//`` and ``/* */`` comments, keeping line structure."""
    source = _BLOCK_COMMENT.sub(lambda m: "\n" * m.group(0).count("\n"), source)
    return _LINE_COMMENT.sub("", source)


def check_includes(source: str, filesystem: Mapping[str, str]) -> None:
    """Ensure every include of ``source`` (transitively) is in ``filesystem``.

    Raises:
        SophiaSyntaxError: On the first missing include.
    """
    seen: set[str] = set()
    pending = find_includes(strip_comments(source))
    while pending:
        name = pending.pop(0)
        if name in seen or name in STDLIB_INCLUDES:
            continue
        if name not in filesystem:
            raise SophiaSyntaxError(f"Couldn't find include file '{name}'")
        seen.add(name)
        pending.extend(find_includes(strip_comments(filesystem[name])))


def check_brackets(source: str) -> None:
    """Ensure parentheses, brackets and braces balance outside string literals.

    Raises:
        SophiaSyntaxError: With the line number of the first imbalance.
    """
    stack: list[tuple[str, int]] = []
    line = 1
    in_string = False
    escaped = False
    for char in source:
        if char == "\n":
            line += 1
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _PAIRS:
            stack.append((char, line))
        elif char in _PAIRS.values():
            if not stack or _PAIRS[stack[-1][0]] != char:
                raise SophiaSyntaxError(f"Unbalanced '{char}' at line {line}")
            stack.pop()
    if stack:
        char, opened = stack[-1]
        raise SophiaSyntaxError(f"Unclosed '{char}' opened at line {opened}")


def scan_contracts(source: str) -> list[ScannedContract]:
    """Return the contract declarations of ``source`` in order."""
    matches = list(_CONTRACT_DECL.finditer(source))
    contracts = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(source)
        contracts.append(
            ScannedContract(
                name=match["name"],
                is_main=bool(match["main"]),
                is_interface=bool(match["interface"]),
                payable=bool(match["payable"]),
                body=source[match.end() : end],
            )
        )
    return contracts


def build_aci(source: str, filesystem: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Scan ``source`` and return the ACI of its main contract.

    Args:
        source: Main contract source text.
        filesystem: Include name → content mapping used to check includes.

    Returns:
        dict: ``{"contract": {...}}`` in the compiler's ACI shape.

    Raises:
        SophiaSyntaxError: If the source cannot be scanned.
    """
    code = strip_comments(source)
    check_brackets(code)
    check_includes(source, filesystem or {})

    contracts = [c for c in scan_contracts(code) if not c.is_interface]
    if not contracts:
        raise SophiaSyntaxError("No contract defined")
    main = next((c for c in contracts if c.is_main), contracts[-1])

    functions = [
        _function(main.name, modifiers, name, params, returns)
        for modifiers, name, params, returns in _scan_entrypoints(main.body)
    ]
    return {
        "contract": {
            "name": main.name,
            "kind": "contract_main",
            "payable": main.payable,
            "functions": functions,
            "typedefs": [],
        }
    }


# ============================================================================
#                               Internals
# ============================================================================


def _scan_entrypoints(body: str) -> list[tuple[str, str, str, str | None]]:
    found = []
    for match in _ENTRYPOINT_DECL.finditer(body):
        open_at = match.end() - 1
        close_at = _matching_paren(body, open_at)
        params = body[open_at + 1 : close_at]
        rest = body[close_at + 1 :]
        equals = _top_level_index(rest, "=")
        head = rest[:equals] if equals >= 0 else rest
        returns = head.split(":", 1)[1].strip() if ":" in head else None
        found.append((match["modifiers"], match["name"], params, returns))
    return found


def _function(
    contract: str, modifiers: str, name: str, params: str, returns: str | None
) -> dict[str, Any]:
    arguments = []
    for i, param in enumerate(_split_top_level(params, ",")):
        if ":" not in param:
            raise SophiaSyntaxError(
                f"Argument {i + 1} of entrypoint '{name}' needs a type annotation"
            )
        arg_name, arg_type = param.split(":", 1)
        arguments.append({"name": arg_name.strip(), "type": parse_sophia_type(arg_type, contract)})

    if returns is not None:
        return_type = parse_sophia_type(returns, contract)
    elif name == "init":
        return_type = f"{contract}.state"
    else:
        return_type = {"tuple": []}

    return {
        "name": name,
        "arguments": arguments,
        "returns": return_type,
        "stateful": "stateful" in modifiers.split(),
        "payable": "payable" in modifiers.split(),
    }


def parse_sophia_type(text: str, contract: str) -> Any:  # pylint: disable=too-many-return-statements
    """Translate a Sophia type expression into the ACI JSON type grammar.

    Unqualified user types are qualified with ``contract``.
    """
    text = text.strip()
    if not text:
        raise SophiaSyntaxError("Empty type expression")

    if text.startswith("(") and _matching_paren(text, 0) == len(text) - 1:
        inner = text[1:-1].strip()
        if not inner:
            return {"tuple": []}
        parts = _split_top_level(inner, "*")
        if len(parts) == 1:
            return parse_sophia_type(parts[0], contract)
        return {"tuple": [parse_sophia_type(p, contract) for p in parts]}

    if "(" in text and text.endswith(")"):
        head = text[: text.index("(")].strip()
        args = _split_top_level(text[text.index("(") + 1 : -1], ",")
        if head == "bytes":
            return {"bytes": int(args[0])}
        params = [parse_sophia_type(a, contract) for a in args]
        if head in ("option", "list", "map"):
            return {head: params}
        return {_qualify(head, contract): params}

    if text == "unit":
        return {"tuple": []}
    if text in _BUILTIN_TYPES:
        return text
    if text == "bytes":
        return {"bytes": None}
    return _qualify(text, contract)


def _qualify(name: str, contract: str) -> str:
    return name if "." in name else f"{contract}.{name}"


def _matching_paren(text: str, open_at: int) -> int:
    depth = 0
    for i in range(open_at, len(text)):
        if text[i] in _PAIRS:
            depth += 1
        elif text[i] in _PAIRS.values():
            depth -= 1
            if depth == 0:
                return i
    raise SophiaSyntaxError("Unclosed parenthesis in signature")


def _top_level_index(text: str, needle: str) -> int:
    depth = 0
    for i, char in enumerate(text):
        if char in _PAIRS:
            depth += 1
        elif char in _PAIRS.values():
            depth -= 1
        elif char == needle and depth == 0:
            # '=>' belongs to function types, not to the definition
            if needle == "=" and text[i + 1 : i + 2] == ">":
                continue
            return i
    return -1


def _split_top_level(text: str, separator: str) -> list[str]:
    parts, depth, current = [], 0, []
    for char in text:
        if char in _PAIRS:
            depth += 1
        elif char in _PAIRS.values():
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]
