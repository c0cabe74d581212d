"""``aeharness compile``: compile a contract source and show its interface.

The entry-point signatures go to **stdout** (or the raw ACI with ``--aci``);
status lines go to **stderr**.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from aeharness import config
from aeharness.adapters.contract_loader import load_contract
from aeharness.bootstrap import build_compiler

from .helpers import success
from .state import CliState, harness_errors, pass_state


@click.command("compile")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--aci", "show_aci", is_flag=True, help="Print the raw ACI as JSON.")
@click.option("--bytecode", "show_bytecode", is_flag=True, help="Also print the bytecode.")
@pass_state
def compile_contract(state: CliState, path: Path, show_aci: bool, show_bytecode: bool) -> None:
    """Compile the contract at PATH with the selected network's compiler."""
    with harness_errors(state.redactor):
        network = config.get_network(state.network, state.config_dir)
        compiler = build_compiler(network, state.redactor)
        try:
            compiled = compiler.compile(load_contract(path))
        finally:
            compiler.close()

    if show_aci:
        click.echo(json.dumps(dict(compiled.aci.raw), indent=2))
    else:
        click.echo(compiled.name)
        for entry in compiled.aci.entrypoints.values():
            click.echo(f"  {entry.signature}")
    if show_bytecode:
        click.echo(compiled.bytecode)
    success(f"Compiled {path.name} ({len(compiled.aci.callable_names)} entrypoints).")
