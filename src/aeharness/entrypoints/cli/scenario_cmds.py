"""``aeharness scenario``: run the bundled scenarios against a network.

Each step is reported on **stdout** as it completes; the final verdict goes to
**stderr**. A failing step makes the command exit with status 1.
"""

from __future__ import annotations

from pathlib import Path

import click
import click_extra as clickx

from aeharness import config
from aeharness.adapters.contract_loader import load_contract
from aeharness.bootstrap import bootstrap
from aeharness.scenario import ScenarioFailedError, ScenarioRunner, StepOutcome, build_nft_scenario
from aeharness.scenario.nft import DEFAULT_NAME, DEFAULT_SYMBOL

from .helpers import error, success
from .state import CliState, harness_errors, pass_state

NFT_SOURCE = "NFT.aes"
RECEIVER_SOURCE = "ExampleContract.aes"
MIN_WALLETS = 2


def _report(total: int):
    def on_step(outcome: StepOutcome) -> None:
        status = click.style("ok", fg="green") if outcome.ok else click.style("FAILED", fg="red")
        click.echo(f"[{outcome.index}/{total}] {outcome.name} ... {status} ({outcome.duration:.2f}s)")

    return on_step


@click.group(cls=clickx.ExtraGroup)
def scenario() -> None:
    """Scenario commands."""


@scenario.command()
@click.option(
    "--contracts-dir",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=config.ROOT / "contracts",
    envvar="AEHARNESS_CONTRACTS_DIR",
    show_envvar=True,
    help=f"Directory holding {NFT_SOURCE} and {RECEIVER_SOURCE}.",
)
@click.option("--name", default=DEFAULT_NAME, show_default=True, help="Token collection name.")
@click.option("--symbol", default=DEFAULT_SYMBOL, show_default=True, help="Token symbol.")
@pass_state
def nft(state: CliState, contracts_dir: Path, name: str, symbol: str) -> None:
    """Run the NFT ownership scenario with the first two configured wallets."""
    with harness_errors(state.redactor):
        nft_artifact = load_contract(contracts_dir / NFT_SOURCE)
        receiver_artifact = load_contract(contracts_dir / RECEIVER_SOURCE)
        container = bootstrap(state.network, state.config_dir, state.redactor)

    try:
        if len(container.wallets) < MIN_WALLETS:
            raise click.ClickException(
                f"The NFT scenario needs {MIN_WALLETS} wallets, "
                f"{len(container.wallets)} configured."
            )
        built = build_nft_scenario(
            container.session(0),
            container.session(1),
            nft_artifact,
            receiver_artifact,
            name=name,
            symbol=symbol,
        )
        runner = ScenarioRunner(built, on_step=_report(len(built)))
        try:
            runner.run()
        except ScenarioFailedError as e:
            error(state.redactor.sanitize_text(str(e)))
            raise SystemExit(1) from e
    finally:
        container.close()

    success(f"Scenario '{built.name}' passed ({len(built)} steps).")
