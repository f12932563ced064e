"""Command-line entry point for the tinyxvc server."""

from __future__ import annotations

import logging
import sys
from typing import Sequence

from .activation import activate_driver, deactivate_driver
from .config import ServerConfig, load_config
from .drivers import DriverRegistry
from .drivers.dummy import DummyDriver
from .errors import BadOptionError, OptionParseError, ServerAddressError
from .options import CliOptions, parse_options, render_usage
from .server import DEFAULT_SERVER_ADDRESS, ServerRunner, load_server_runner, parse_server_address
from .termination import TerminationFlag, listen_for_user_interrupt, restore_interrupt_handler

LOG = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_HANDLER_NAME = "tinyxvc-console"


def configure_logging(verbose: bool) -> None:
    """Send tinyxvc records to stderr at INFO, or DEBUG when verbose."""

    logger = logging.getLogger("tinyxvc")
    for stale in [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]:
        logger.removeHandler(stale)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _first_set(*values: str | None) -> str:
    return next(value for value in values if value is not None)


def build_registry(config: ServerConfig) -> DriverRegistry:
    allowlist, disabled = config.driver_filters()
    return DriverRegistry(
        enabled_drivers=allowlist,
        disabled_drivers=disabled,
        builtin_drivers=[DummyDriver],
    )


def main(
    argv: Sequence[str] | None = None,
    *,
    config: ServerConfig | None = None,
    registry: DriverRegistry | None = None,
    runner: ServerRunner | None = None,
) -> int:
    """Run the server; return the process exit status."""

    args = list(sys.argv if argv is None else argv)
    prog = args[0] if args else "tinyxvc"
    try:
        options: CliOptions = parse_options(args)
    except OptionParseError as exc:
        if isinstance(exc, BadOptionError):
            print(exc, file=sys.stderr)
        print(render_usage(prog), end="")
        return EXIT_FAILURE

    config = config if config is not None else load_config()
    configure_logging(options.verbose or config.verbose)
    aliases = config.profile_aliases()
    registry = registry if registry is not None else build_registry(config)
    registry.discover()

    if options.help:
        print(render_usage(prog, detailed=True, drivers=registry, aliases=aliases), end="")
        return EXIT_SUCCESS

    profile = options.profile if options.profile is not None else config.profile
    if profile is None:
        print("Profile is missing", file=sys.stderr)
        return EXIT_FAILURE

    try:
        address = parse_server_address(
            _first_set(options.server_address, config.server_address, DEFAULT_SERVER_ADDRESS)
        )
    except ServerAddressError as exc:
        print(f"{prog}: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    flag = TerminationFlag()
    previous = listen_for_user_interrupt(flag)
    try:
        driver = activate_driver(profile, registry, aliases=aliases)
        if driver is None:
            return EXIT_FAILURE
        try:
            runner = runner if runner is not None else load_server_runner()
            LOG.info("Serving XVC at %s with driver %s", address, driver.name)
            runner.run(address, driver, flag)
        finally:
            deactivate_driver(driver)
    finally:
        restore_interrupt_handler(previous)
        flag.close()
    return EXIT_SUCCESS


__all__ = ["EXIT_FAILURE", "EXIT_SUCCESS", "build_registry", "configure_logging", "main"]
