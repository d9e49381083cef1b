"""Set up a BDD manager and run a benchmark body inside the JSON report."""

from __future__ import annotations

import sys
from typing import Callable, TextIO

from bddbench.bdd import BddManager
from bddbench.chrono import duration_ms, now
from bddbench.cli import CommonOptions
from bddbench.jsonout import JsonWriter

Body = Callable[[BddManager, JsonWriter], int]


def ilog2(n: int) -> int:
    """floor(log2(n)) for positive n."""
    if n <= 0:
        raise ValueError("ilog2 requires a positive argument")
    return n.bit_length() - 1


def run(
    benchmark_name: str,
    varcount: int,
    body: Body,
    options: CommonOptions | None = None,
    stream: TextIO | None = None,
) -> int:
    """Create the manager, print the report header, run `body` and close the report.

    Returns the exit code produced by `body`.
    """
    options = options if options is not None else CommonOptions()
    out = JsonWriter(stream if stream is not None else sys.stdout)

    out.brace_open().endl()
    out.field("debug_mode").value(__debug__).comma().endl()
    out.field("statistics").value(False).comma().endl()
    out.endl()
    out.field("bdd package").brace_open().endl()
    out.field("name").value(BddManager.name).comma().endl()
    out.field("type").value(BddManager.dd).comma().endl()

    t_before = now()
    adapter = BddManager(varcount)
    t_after = now()

    out.field("init time (ms)").value(duration_ms(t_before, t_after)).comma().endl()
    out.field("memory (MiB)").value(options.memory_mib).comma().endl()
    out.field("variables").value(varcount).endl()
    out.brace_close().comma().endl()
    out.endl()

    out.field("benchmark").brace_open().endl()
    out.field("name").value(benchmark_name).comma().endl().flush()

    exit_code = body(adapter, out)

    out.brace_close().endl().brace_close().endl().flush()
    return exit_code