"""Contract source loader.

Reads a contract source file and builds the virtual filesystem the compiler
needs to resolve ``include "<name>"`` directives. Includes are resolved
relative to the directory of the file that declares them, transitively, and
each include name is read once. Names that belong to the compiler's bundled
standard library are left for the compiler to resolve.

Typical usage::

    artifact = load_contract("contracts/NFT.aes")
    artifact.source        # text of NFT.aes
    artifact.filesystem    # {"NFTReceiver.aes": "...", ...}

The loader only reads from the filesystem; it never writes.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from aeharness.domain.errors import LoadError
from aeharness.domain.value_objects import ContractArtifact

logger = logging.getLogger(__name__)

INCLUDE_PATTERN = re.compile(r'^\s*include\s+"(?P<name>[^"]+)"', re.MULTILINE)

STDLIB_INCLUDES = frozenset(
    {
        "List.aes",
        "Option.aes",
        "String.aes",
        "Func.aes",
        "Pair.aes",
        "Triple.aes",
        "BLS12_381.aes",
        "Frac.aes",
        "Set.aes",
        "Bitwise.aes",
    }
)


def find_includes(source: str) -> list[str]:
    """Return the non-stdlib include names declared in ``source``, in order."""
    return [
        match["name"]
        for match in INCLUDE_PATTERN.finditer(source)
        if match["name"] not in STDLIB_INCLUDES
    ]


def read_source(path: str | Path) -> str:
    """Read a contract source file as UTF-8 text.

    Raises:
        LoadError: If the path does not exist, is a directory, or is unreadable.
    """
    source_path = Path(path)
    if not source_path.is_file():
        reason = "is a directory" if source_path.is_dir() else "file not found"
        raise LoadError(str(source_path), reason)
    try:
        return source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(str(source_path), str(e)) from e


def build_filesystem(source: str, base_dir: str | Path) -> dict[str, str]:
    """Resolve the includes of ``source`` into a name → content mapping.

    Args:
        source: Text of the including file.
        base_dir: Directory against which the source's includes are resolved.

    Returns:
        dict[str, str]: Every transitively included file, keyed by the name
        used in the include directive.

    Raises:
        LoadError: If an included file is missing.
    """
    filesystem: dict[str, str] = {}
    pending = [(name, Path(base_dir)) for name in find_includes(source)]
    while pending:
        name, directory = pending.pop(0)
        if name in filesystem:
            continue
        include_path = directory / name
        if not include_path.is_file():
            raise LoadError(str(include_path), f"included file '{name}' not found")
        content = read_source(include_path)
        filesystem[name] = content
        logger.debug("Resolved include %s -> %s", name, include_path)
        pending.extend((child, include_path.parent) for child in find_includes(content))
    return filesystem


def load_contract(path: str | Path) -> ContractArtifact:
    """Load a contract source file and all of its includes.

    Args:
        path: Path to the main contract source file.

    Returns:
        ContractArtifact: The source text and its include filesystem.

    Raises:
        LoadError: If the file or any include is missing.
    """
    source_path = Path(path)
    source = read_source(source_path)
    filesystem = build_filesystem(source, source_path.parent)
    logger.info(
        "Loaded contract %s (%d include%s)",
        source_path.name,
        len(filesystem),
        "" if len(filesystem) == 1 else "s",
    )
    return ContractArtifact(source=source, filesystem=filesystem, path=source_path)
