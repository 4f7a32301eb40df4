"""
Pre-parser for the order-sensitive command-line flags.

`--value` belongs to whichever `--input` or `--button` came just before
it, and `--wait-for-navigation` takes an optional number. Neither fits a
declarative option parser, so these flags are lifted out of argv here
and everything else is handed to Typer untouched.
"""

from dataclasses import dataclass, field

from web_reader.core.exceptions import ConfigurationError
from web_reader.session.models import ButtonChoice, FieldFill

INPUT_FLAG = "--input"
VALUE_FLAG = "--value"
BUTTON_FLAG = "--button"
WAIT_FLAG = "--wait-for-navigation"


@dataclass
class OrderedOptions:
    """Flags whose meaning depends on their position in argv."""

    inputs: list[FieldFill] = field(default_factory=list)
    button: ButtonChoice | None = None
    wait_for_navigation: bool = False
    navigation_timeout_ms: int | None = None


def _split_flag(arg: str) -> tuple[str, str | None]:
    """Split "--flag=value" into its parts."""
    if arg.startswith("--") and "=" in arg:
        flag, _, value = arg.partition("=")
        return flag, value
    return arg, None


def _take_value(args: list[str], i: int, flag: str) -> tuple[str, int]:
    """Return the token after position i, or fail when there is none."""
    if i + 1 >= len(args):
        raise ConfigurationError(f"Option {flag} requires an argument")
    return args[i + 1], i + 1


def split_ordered_options(argv: list[str]) -> tuple[list[str], OrderedOptions]:
    """
    Extract --input/--value/--button/--wait-for-navigation from argv.

    Rules:
        - `--input NAME` queues a field fill with an empty value
        - `--value V` sets the value of the most recent --input or --button
        - `--button NAME` selects button submission; a later one replaces it
        - `--wait-for-navigation [MS]` enables the post-script wait, with
          MS taken only when the next token is a non-negative integer;
          without MS the configured script navigation timeout applies
        - everything after a bare `--` is passed through as is

    Args:
        argv: Arguments without the program name

    Returns:
        (remaining arguments for Typer, ordered options)

    Raises:
        ConfigurationError: If a flag is missing its argument or
            --value has nothing to attach to
    """
    options = OrderedOptions()
    remaining: list[str] = []
    # Which entry the next --value applies to: "input" or "button"
    target: str | None = None

    i = 0
    while i < len(argv):
        arg = argv[i]

        if arg == "--":
            remaining.extend(argv[i:])
            break

        flag, inline = _split_flag(arg)

        if flag == INPUT_FLAG:
            if inline is None:
                inline, i = _take_value(argv, i, flag)
            options.inputs.append(FieldFill(name=inline))
            target = "input"

        elif flag == BUTTON_FLAG:
            if inline is None:
                inline, i = _take_value(argv, i, flag)
            options.button = ButtonChoice(name=inline)
            target = "button"

        elif flag == VALUE_FLAG:
            if inline is None:
                inline, i = _take_value(argv, i, flag)
            if target == "input":
                options.inputs[-1] = FieldFill(options.inputs[-1].name, inline)
            elif target == "button":
                options.button = ButtonChoice(options.button.name, inline)
            else:
                raise ConfigurationError(
                    "--value must follow --input or --button")

        elif flag == WAIT_FLAG:
            options.wait_for_navigation = True
            if inline is not None:
                if not inline.isdigit():
                    raise ConfigurationError(
                        f"Invalid timeout for {WAIT_FLAG}: {inline!r}")
                options.navigation_timeout_ms = int(inline)
            elif i + 1 < len(argv) and argv[i + 1].isdigit():
                options.navigation_timeout_ms = int(argv[i + 1])
                i += 1

        else:
            remaining.append(arg)

        i += 1

    return remaining, options
