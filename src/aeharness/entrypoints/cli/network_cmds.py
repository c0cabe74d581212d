"""``aeharness networks``: show the configured environments."""

from __future__ import annotations

import click

from aeharness import config

from .helpers import sanitize_endpoint, warn
from .state import CliState, harness_errors, pass_state


@click.command()
@pass_state
def networks(state: CliState) -> None:
    """List configured networks; the selected one is marked with '*'."""
    with harness_errors(state.redactor):
        configured = config.load_networks(state.config_dir)
    selected = state.network or config.get_network_name()
    width = max((len(name) for name in configured), default=0)
    for name in sorted(configured):
        network = configured[name]
        marker = "*" if name == selected else " "
        click.echo(
            f"{marker} {name:<{width}}  "
            f"node={sanitize_endpoint(network.node_url, state.redactor)}  "
            f"compiler={sanitize_endpoint(network.compiler_url, state.redactor)}  "
            f"network_id={network.network_id or '<from node>'}"
        )
    if selected not in configured:
        warn(f"Selected network '{selected}' is not configured.")
