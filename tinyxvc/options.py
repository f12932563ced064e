"""Table-driven command-line option parsing and usage rendering."""

from __future__ import annotations

import getopt
import sys
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence, TextIO

from . import __version__
from .drivers import Driver
from .errors import BadOptionError, ExtraOperandsError
from .profiles import ProfileAlias
from .server import DEFAULT_SERVER_ADDRESS


def _argument(value: str) -> str:
    return value


def _flag(_value: str) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declarative description of a single short option."""

    name: str
    flag: str
    metavar: str
    description: str
    extract: Callable[[str], Any]

    @property
    def takes_value(self) -> bool:
        return bool(self.metavar)


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Options collected from the command line."""

    server_address: str | None = None
    profile: str | None = None
    verbose: bool = False
    help: bool = False


def build_option_table(*specs: OptionSpec) -> tuple[OptionSpec, ...]:
    """Return an option table, rejecting malformed or duplicate flags."""

    seen: set[str] = set()
    for spec in specs:
        if len(spec.flag) != 1 or spec.flag in ":-":
            raise ValueError(f"Option '{spec.name}' has an invalid flag {spec.flag!r}")
        if spec.flag in seen:
            raise ValueError(f"Flag '-{spec.flag}' is declared more than once")
        seen.add(spec.flag)
    return tuple(specs)


OPTIONS = build_option_table(
    OptionSpec(
        name="server_address",
        flag="a",
        metavar="<ipv4_address:port>",
        description=(
            "Colon-separated IPv4 address and port to listen for incoming XVC connections at"
            f" (default: {DEFAULT_SERVER_ADDRESS})"
        ),
        extract=_argument,
    ),
    OptionSpec(
        name="profile",
        flag="p",
        metavar="<profile_string_or_alias>",
        description="Server HW profile or profile alias, see below",
        extract=_argument,
    ),
    OptionSpec(name="verbose", flag="v", metavar="", description="Enable verbose output", extract=_flag),
    OptionSpec(name="help", flag="h", metavar="", description="Print this message", extract=_flag),
)


def short_option_string(table: Sequence[OptionSpec] = OPTIONS) -> str:
    """Build the getopt specification, marking value-taking flags with ':'."""

    return "".join(spec.flag + ":" if spec.takes_value else spec.flag for spec in table)


def parse_options(
    argv: Sequence[str],
    table: Sequence[OptionSpec] = OPTIONS,
    *,
    factory: Callable[..., Any] = CliOptions,
    stderr: TextIO | None = None,
) -> Any:
    """Parse `argv` (program name first) into a record built by `factory`.

    Raises `BadOptionError` for unknown flags and `ExtraOperandsError` when
    positional arguments remain. Printing usage is left to the caller.
    """

    prog = argv[0] if argv else "tinyxvc"
    by_flag = {"-" + spec.flag: spec for spec in table}
    try:
        parsed, operands = getopt.gnu_getopt(list(argv[1:]), short_option_string(table))
    except getopt.GetoptError as exc:
        raise BadOptionError(f"{prog}: {exc.msg}") from exc

    values: dict[str, Any] = {}
    for opt, arg in parsed:
        spec = by_flag.get(opt)
        if spec is None:
            raise BadOptionError(f"{prog}: option {opt} not recognized")
        values[spec.name] = spec.extract(arg)

    if operands:
        stream = stderr if stderr is not None else sys.stderr
        print(f"{prog}: unrecognized extra operands", file=stream)
        raise ExtraOperandsError(f"{prog}: unrecognized extra operands: {' '.join(operands)}")
    return factory(**values)


def render_usage(
    prog: str,
    table: Sequence[OptionSpec] = OPTIONS,
    *,
    detailed: bool = False,
    drivers: Iterable[Driver] = (),
    aliases: Iterable[ProfileAlias] = (),
) -> str:
    """Render the synopsis and option list, plus profile help when detailed."""

    synopsis: list[str] = []
    described: list[str] = []
    for spec in table:
        metavar = f" {spec.metavar}" if spec.takes_value else ""
        synopsis.append(f"\t\t[-{spec.flag}{metavar}]\n")
        described.append(f" -{spec.flag} - {spec.description}\n")

    lines: list[str] = []
    if detailed:
        lines.append(f"TinyXVC - minimalistic XVC (Xilinx Virtual Cable) server, v{__version__}\n")
    lines.append(f"Usage: {prog}\n{''.join(synopsis)}\n{''.join(described)}\n")
    if not detailed:
        return "".join(lines)

    lines.append("\tProfiles:\n")
    lines.append(
        "HW profile is a specification that defines a backend to be used by server"
        " and its parameters. Backend here means a particular device that eventually"
        " receives and answers to XVC commands. HW profile is specified in the following form:\n"
        "\n\t<driver_name>:<arg0>=<val0>,<arg1>=<val1>,<arg2>=<val2>,...\n\n"
        "Available driver names as well as their specific parameters are listed below."
        " Also there are a few predefined profile aliases for specific HW that can be used"
        " instead of fully specified description, see below.\n\n"
    )
    lines.append("\tDrivers:\n")
    for driver in drivers:
        lines.append(f'"{driver.name}":\n{driver.help}\n')
    lines.append("\n")
    lines.append("\tAliases:\n")
    for alias in aliases:
        lines.append(f'"{alias.alias}" - {alias.description}\n')
    lines.append("\n")
    return "".join(lines)


__all__ = [
    "CliOptions",
    "OPTIONS",
    "OptionSpec",
    "build_option_table",
    "parse_options",
    "render_usage",
    "short_option_string",
]
