"""aeharness CLI entry point.

Defines the top-level ``aeharness`` command (via Click-Extra) and registers
the subcommands exposed by the project.

Currently available commands
- ``aeharness networks`` : list the configured networks.
- ``aeharness compile PATH`` : compile a contract and print its interface.
- ``aeharness scenario nft`` : run the NFT ownership scenario.

Notes
- The CLI version is sourced from `aeharness.__version__` and displayed
  automatically by Click-Extra (``--version``).
- ``--network`` and ``--config-dir`` select the environment for every
  subcommand.

Examples
    $ aeharness --version
    $ aeharness --network devnet scenario nft
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from aeharness import __version__
from aeharness.adapters.redactor import Redactor
from aeharness.config import CONFIG_DIR_ENV, NETWORK_ENV
from aeharness.interfaces.redactor import RedactorMode
from aeharness.logging import config_console_handler, config_flight_recorder, log_startup

from .contract_cmds import compile_contract
from .helpers import hyperlink
from .helpers.log_level_parser import parse_log_level
from .network_cmds import networks
from .scenario_cmds import scenario
from .state import CliState

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """AEHARNESS command-line interface.

    AEHARNESS is a test harness for Sophia smart contracts. It compiles and deploys
    contracts through a node and a compiler service, or an in-process devnet, and runs
    scenarios whose every step is signed by the actor it names.
    """


EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('See Also:', fg='blue', bold=True, underline=True)}",
        "  Sophia: " + hyperlink("https://docs.aeternity.com/aesophia/"),
        "  Node  : " + hyperlink("https://docs.aeternity.com/aeternity/"),
    ]
)


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--network",
    "network",
    help="Configured network to use (default: 'local').",
    envvar=NETWORK_ENV,
    show_envvar=True,
)
@click.option(
    "--config-dir",
    "config_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding network.json and wallets.json.",
    envvar=CONFIG_DIR_ENV,
    show_envvar=True,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("aeharness", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="AEHARNESS_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="AEHARNESS_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records "
        "(tunable via AEHARNESS_FLIGHT_RECORDER_CAPACITY) at DEBUG granularity "
        "(unaffected by -v/-q) and writes them to --log-path when a WARNING/ERROR "
        "occurs, or on clean exit if --force-flush is set. Console verbosity is "
        "unchanged. Use --no-flight-recorder to disable."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help=(
        "Force-flush the flight recorder buffer to --log-path on program exit. "
        "Normally the buffer only dumps on WARNING/ERROR; console output is unaffected. "
        "Use --no-force-flush to disable."
    ),
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,  # repeatable option
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). This changes the "
        "logger's own level, so it applies to BOTH console and flight-recorder. "
        "Use to quiet verbose third-party libs. Repeatable (e.g. -L httpx=INFO "
        "-L httpcore=WARNING) or via AEHARNESS_LOGGER_LEVELS (comma/space list)."
    ),
    default=("httpx=WARNING", "httpcore=WARNING"),
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--redactor-mode",
    "redactor_mode",
    type=click.Choice(["lenient", "strict"], case_sensitive=False),
    help=(
        "Set the redaction mode for logs and error messages. "
        "'lenient' (default) redact secret keys, passwords and tokens but keep "
        "usernames and account addresses visible; 'strict' also redact those."
    ),
    default="lenient",
    show_envvar=True,
    show_default=True,
)
@clickx.pass_context
def aeharness(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    network: str | None,
    config_dir: Path | None,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """AEHARNESS command-line interface."""

    # 0) compute effective verbosity
    base_level = logging.WARNING
    level = base_level - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    redactor = Redactor(RedactorMode(redactor_mode.lower()))
    handlers: list[Handler] = []

    # 1) configure console handler
    use_color = ctx.color is not False  # None or True => allow color
    rich_handler = config_console_handler(
        level=level, debug_mode=debug, color=use_color, redactor=redactor
    )
    handlers.append(rich_handler)

    # 2) configure flight recorder
    if flight_recorder:
        flight_recorder_handler = config_flight_recorder(
            path=log_path,
            capacity=flight_recorder_capacity,
            flush_on_close=force_flush_flight_recorder,
            redactor=redactor,
        )
        handlers.append(flight_recorder_handler)

    # 3) Configure root logger with configured handlers
    logging.basicConfig(
        level=logging.DEBUG,  # capture all levels; handlers filter
        handlers=handlers,
        force=True,  # override any existing logging config
    )

    # 4) Set 3rd-party logger levels
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    # 5) Log startup info
    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
        redactor_mode=redactor_mode,
    )

    # 6) Share the environment selection with subcommands
    ctx.obj = CliState(
        network=network,
        config_dir=config_dir,
        redactor=redactor,
    )

    # 7) Ensure logging is cleanly shutdown on program exit
    ctx.call_on_close(logging.shutdown)  # <- will run after the command returns


aeharness.add_command(networks)
aeharness.add_command(compile_contract)
aeharness.add_command(scenario)
