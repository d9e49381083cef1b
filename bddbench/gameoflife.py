"""Benchmark: search for Garden-of-Eden states in Conway's Game of Life."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

from bddbench.chrono import duration_ms, now
from bddbench.cli import HelpRequested, InputError, ParsingPolicy, parse_input
from bddbench.life_grid import POST, PRE, Cell, Grid, Symmetry, VarMap
from bddbench.runner import run

# Size of the neighbourhood used to bound the counting chains.
_NEIGHBOURHOOD_SIZE = 9


class GameOfLifePolicy(ParsingPolicy):
    name = "Game of Life (Garden-of-Eden)"
    args = "n:s:"
    help_text = (
        "        -n n         [4]      Size of grid\n"
        "        -s SYMMETRY  [none]   Restriction to solutions with a symmetry"
    )

    def __init__(self) -> None:
        self.n_rows = -1
        self.n_cols = -1
        self.symmetry = Symmetry.NONE

    def handle(self, flag: str, arg: str | None) -> None:
        if flag == "n":
            n = int((arg or "").strip())
            if n <= 0:
                raise InputError("  Must specify positive grid size (-n)")
            if self.n_rows < 0:
                self.n_rows = n
            else:
                self.n_cols = n
        elif flag == "s":
            self.symmetry = Symmetry.parse(arg or "")
        else:
            raise InputError(f"Unknown option -{flag}")


@dataclass
class Timings:
    """Accumulated time spent in apply and in existential quantification."""

    apply_ms: int = 0
    exists_ms: int = 0


def construct_count(adapter, vm: VarMap, cell: Cell, alive: int):
    """Diagram that holds iff exactly `alive` unprimed cells around `cell` (itself included) live."""
    if alive < 0:
        raise ValueError("Number of alive cells must be non-negative")

    remaining = _NEIGHBOURHOOD_SIZE + 1
    if alive > remaining:
        return adapter.bot()

    parts = [adapter.build_node(False)] * (alive + 2)
    parts[alive] = adapter.build_node(True)

    alive_max = alive
    alive_min = alive

    for x in range(vm.varcount() - 1, -1, -1):
        curr = vm.cell_from_var(x)

        if curr.prime == PRE and cell.in_neighbourhood(curr):
            remaining -= 1
            alive_min = max(alive_min - 1, 0)
            if 0 < remaining == alive_max:
                alive_max -= 1

            for idx in range(alive_min, alive_max + 1):
                parts[idx] = adapter.build_node(x, parts[idx], parts[idx + 1])
        else:
            for idx in range(alive_min, alive_max + 1):
                child = parts[idx]
                parts[idx] = adapter.build_node(x, child, child)

    return adapter.build()


def construct_eq(adapter, vm: VarMap, cell: Cell):
    """Diagram that holds iff the cell keeps its state across the transition."""
    x_pre = vm.var_from_cell(cell.with_prime(PRE))
    x_post = vm.var_from_cell(cell.with_prime(POST))
    if not x_pre < x_post:
        raise ValueError("Unprimed variable must precede its primed variable")

    root0 = adapter.build_node(True)
    x = vm.varcount() - 1

    while x_post < x:
        root0 = adapter.build_node(x, root0, root0)
        x -= 1

    root1 = adapter.build_node(x, adapter.build_node(False), root0)
    root0 = adapter.build_node(x, root0, adapter.build_node(False))

    x -= 1
    while x_pre < x:
        root1 = adapter.build_node(x, root1, root1)
        root0 = adapter.build_node(x, root0, root0)
        x -= 1

    root0 = adapter.build_node(x, root0, root1)

    x -= 1
    while 0 <= x:
        root0 = adapter.build_node(x, root0, root0)
        x -= 1

    return adapter.build()


def cell_relation(adapter, vm: VarMap, cell: Cell):
    """Transition relation of a single cell.

    A neighbourhood sum of 3 makes the cell alive, a sum of 4 keeps its
    state, and any other sum kills it.
    """
    post_var = vm.var_from_cell(cell.with_prime(POST))

    alive_3 = construct_count(adapter, vm, cell, 3)
    alive_4 = construct_count(adapter, vm, cell, 4)

    out = adapter.apply_imp(alive_3, adapter.ithvar(post_var))
    out &= adapter.apply_imp(alive_4, construct_eq(adapter, vm, cell))
    alive_other = ~(alive_3 | alive_4)
    out &= adapter.apply_imp(alive_other, adapter.nithvar(post_var))
    return out


def row_relation(adapter, vm: VarMap, row: int, timings: Timings):
    """Transition relation of every cell on one row."""
    grid = vm.grid
    res = adapter.top()

    t_before = now()
    for col in range(grid.max_col(POST), grid.min_col(POST) - 1, -1):
        res &= cell_relation(adapter, vm, Cell(row, col, PRE))
    t_after = now()
    timings.apply_ms += duration_ms(t_before, t_after)

    return res


def half_relation(adapter, vm: VarMap, bottom: bool, timings: Timings):
    """Transition relation for the top or bottom half of the board.

    Unprimed rows that no remaining row depends on are quantified early.
    """
    grid = vm.grid
    half_rows = grid.rows(POST) // 2

    top_begin = grid.min_row(POST)
    top_end = top_begin + half_rows - 1
    bot_begin = grid.max_row(POST)
    bot_end = bot_begin - half_rows + 1

    if bottom:
        begin = bot_begin
        rows = range(bot_begin, bot_end - 1, -1)
    else:
        begin = top_begin
        rows = range(top_begin, top_end + 1)

    res = adapter.top()

    for row in rows:
        row_rel = row_relation(adapter, vm, row, timings)

        t_before = now()
        res &= row_rel
        t_after = now()
        timings.apply_ms += duration_ms(t_before, t_after)

        quant_row = row + (1 if bottom else -1)
        if (begin <= quant_row) if bottom else (quant_row < begin):
            t_before = now()
            res = adapter.exists(
                res,
                lambda x, q=quant_row: (
                    vm.cell_from_var(x).prime == PRE and vm.cell_from_var(x).row == q
                ),
            )
            t_after = now()
            timings.exists_ms += duration_ms(t_before, t_after)

    return res


def garden_of_eden(adapter, vm: VarMap, timings: Timings):
    """Set of primed states that have a predecessor: the whole relation with all
    unprimed variables quantified away."""
    grid = vm.grid

    res = half_relation(adapter, vm, False, timings)
    res &= half_relation(adapter, vm, True, timings)

    if grid.rows(POST) % 2 == 1:
        res &= row_relation(adapter, vm, grid.rows(POST) // 2 + 1, timings)

    easy_rows = (grid.min_row(PRE), grid.max_row(POST), grid.max_row(PRE))

    def easy(x: int) -> bool:
        c = vm.cell_from_var(x)
        return c.prime == PRE and any(vm.row_symmetric(c, r) for r in easy_rows)

    t_before = now()
    res = adapter.exists(res, easy)
    t_after = now()
    timings.exists_ms += duration_ms(t_before, t_after)

    t_before = now()
    res = adapter.exists(res, lambda x: vm.cell_from_var(x).prime == PRE)
    t_after = now()
    timings.exists_ms += duration_ms(t_before, t_after)

    return res


def construct_post(adapter, vm: VarMap):
    """Diagram that holds for every assignment to the primed variables."""
    root = adapter.build_node(True)
    for x in range(vm.varcount() - 1, -1, -1):
        if vm.cell_from_var(x).prime != POST:
            continue
        root = adapter.build_node(x, root, root)
    return adapter.build()


def run_gameoflife(argv: list[str], stream: TextIO | None = None) -> int:
    """Run the Garden-of-Eden benchmark; returns the process exit code.

    The exit code is 1 if any unreachable state was found, 0 otherwise.
    """
    out_stream = stream if stream is not None else sys.stdout
    policy = GameOfLifePolicy()
    try:
        options = parse_input(argv, policy)
    except HelpRequested as ex:
        out_stream.write(ex.text)
        out_stream.flush()
        return -1
    except InputError as ex:
        for message in ex.messages:
            print(message, file=sys.stderr)
        return -1

    n_rows = policy.n_rows if policy.n_rows >= 0 else 4
    n_cols = policy.n_cols if policy.n_cols >= 0 else n_rows
    grid = Grid(n_rows, n_cols)
    sym = policy.symmetry

    if grid.rows() < grid.cols():
        print(
            "Note:\n"
            "|   The variable ordering is designed for 'cols <= rows'.\n"
            "|   Maybe restart with the dimensions flipped?\n",
            file=sys.stderr,
        )

    try:
        vm = VarMap(grid, sym)
    except ValueError as ex:
        print(ex, file=sys.stderr)
        return -1

    def body(adapter, out) -> int:
        out.field("rows").value(n_rows).comma().endl()
        out.field("cols").value(n_cols).comma().endl()
        out.field("symmetry").value(str(sym)).comma().endl()
        out.field("variables[prev]").value(vm.varcount(PRE)).comma().endl()
        out.field("variables[next]").value(vm.varcount(POST)).comma().endl()
        out.endl()

        timings = Timings()

        out.field("reachable").brace_open().endl().flush()
        t1 = now()
        res = garden_of_eden(adapter, vm, timings)
        t2 = now()
        goe_time = duration_ms(t1, t2)
        out.field("time (ms)").value(goe_time).comma().endl()
        out.field("time[apply] (ms)").value(timings.apply_ms).comma().endl()
        out.field("time[exists] (ms)").value(timings.exists_ms).endl()
        out.brace_close().comma().endl()

        out.field("unreachable").brace_open().endl()
        t3 = now()
        post_top = construct_post(adapter, vm)
        res = adapter.apply_diff(post_top, res)
        t4 = now()
        flip_time = duration_ms(t3, t4)
        out.field("time (ms)").value(flip_time).endl()
        out.brace_close().comma().endl()

        out.field("satcount").brace_open().endl()
        t5 = now()
        solutions = adapter.satcount(res, vm.varcount(POST))
        t6 = now()
        counting_time = duration_ms(t5, t6)
        out.field("result").value(solutions).comma().endl()
        out.field("time (ms)").value(counting_time).endl()
        out.brace_close().comma().endl()

        total = goe_time + flip_time + counting_time
        out.field("total time (ms)").value(total).endl()

        return int(solutions != 0)

    return run("game-of-life", vm.varcount(), body, options, out_stream)


def main(argv: list[str] | None = None) -> int:
    return run_gameoflife(sys.argv[1:] if argv is None else argv)