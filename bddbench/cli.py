"""Command-line option parsing shared by all benchmarks."""

from __future__ import annotations

import getopt
import re
from dataclasses import dataclass

_COMMON_ARGS = "hM:P:RT:"
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_SPACES = " \t\n\v\f\r"
_LOWER_TABLE = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)
_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+")


class InputError(Exception):
    """Raised when command-line input is invalid; holds every message found."""

    def __init__(self, *messages: str) -> None:
        super().__init__("\n".join(messages))
        self.messages = list(messages)


class HelpRequested(Exception):
    """Raised when usage information should be shown instead of running."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


@dataclass
class CommonOptions:
    """Options shared by every benchmark."""

    memory_mib: int = 128
    threads: int = 1
    enable_reordering: bool = False
    temp_path: str = ""


class ParsingPolicy:
    """Benchmark-specific options: a name, a getopt spec and a help text."""

    name = "Benchmark"
    args = ""
    help_text = ""

    def handle(self, flag: str, arg: str | None) -> None:
        """Process one benchmark option; raise InputError when it is invalid."""
        raise InputError(f"Unknown option -{flag}")


def ascii_tolower(text: str) -> str:
    """Lowercase the ASCII letters of a string, leaving all else untouched."""
    return text.translate(_LOWER_TABLE)


def ascii_ltrim(text: str) -> str:
    return text.lstrip(_SPACES)


def ascii_rtrim(text: str) -> str:
    return text.rstrip(_SPACES)


def ascii_trim(text: str) -> str:
    return ascii_rtrim(ascii_ltrim(text))


def is_prefix(a: str, b: str) -> bool:
    """Whether `a` is a prefix of `b`."""
    return b.startswith(a)


def _stoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError("stoi")
    value = int(match.group().strip(_SPACES))
    if not _INT_MIN <= value <= _INT_MAX:
        raise OverflowError("stoi")
    return value


def usage(policy: ParsingPolicy) -> str:
    """The help text printed for `-h` or an unrecognised option."""
    rule = "-" * 79 + "\n"
    return (
        f"{policy.name} Benchmark\n"
        + rule
        + "Usage:  -flag      [default] Description\n"
        + rule
        + "        -h                   Print this information\n"
        + "\n"
        + rule
        + "BDD Package options:\n"
        + "        -M MiB       [128]    Amount of memory (MiB)\n"
        + "        -P THREADS   [1]      Worker thread count\n"
        + "        -R                    Enable dynamic variable reordering\n"
        + "        -T TEMP_PTH  [/tmp]   Filepath for temporary files on disk\n"
        + "\n"
        + rule
        + "Benchmark options:\n"
        + policy.help_text
        + "\n"
    )


def _takes_argument(spec: str, flag: str) -> bool:
    index = spec.find(flag)
    return index >= 0 and spec[index + 1 : index + 2] == ":"


def parse_input(argv: list[str], policy: ParsingPolicy) -> CommonOptions:
    """Parse `argv` (without the program name) into common options.

    Benchmark-specific flags are handed to `policy.handle`. Raises
    HelpRequested for `-h` or unrecognised options, and InputError with all
    collected messages if any option was invalid.
    """
    spec = _COMMON_ARGS + policy.args
    try:
        opts, _rest = getopt.gnu_getopt(list(argv), spec)
    except getopt.GetoptError:
        raise HelpRequested(usage(policy)) from None

    options = CommonOptions()
    errors: list[str] = []

    for opt, raw in opts:
        flag = opt[1:]
        arg = raw if _takes_argument(spec, flag) else None
        try:
            if flag == "M":
                options.memory_mib = _stoi(raw)
                if options.memory_mib <= 0:
                    errors.append("  Must specify positive amount of memory (-M)")
            elif flag == "P":
                options.threads = _stoi(raw)
                if options.threads <= 0:
                    errors.append("  Must specify a positive thread count (-P)")
            elif flag == "R":
                options.enable_reordering = True
            elif flag == "T":
                options.temp_path = raw
            elif flag == "h":
                raise HelpRequested(usage(policy))
            else:
                policy.handle(flag, arg)
        except InputError as ex:
            errors.extend(ex.messages)
        except OverflowError as ex:
            errors.append(f"Number out of range: {ex}")
        except ValueError as ex:
            errors.append(f"Invalid number: {ex}")

    if errors:
        raise InputError(*errors)
    return options