"""Benchmark: build the conjunction of the clauses of a DIMACS CNF file."""

from __future__ import annotations

import os
import sys
from typing import Iterator, Sequence, TextIO

from bddbench.chrono import duration_ms, now
from bddbench.cli import HelpRequested, InputError, ParsingPolicy, parse_input
from bddbench.runner import run

_INT_MAX = 2**31 - 1
_DIGITS = frozenset("0123456789")


class CnfError(ValueError):
    """Raised when a DIMACS CNF input cannot be parsed."""


def _parse_int(token: str) -> int | None:
    body = token[1:] if token[:1] in ("+", "-") else token
    if not body or not set(body) <= _DIGITS:
        return None
    return int(token)


class Cnf:
    """Clauses of a CNF formula together with a variable-to-level mapping."""

    def __init__(self, clauses: Sequence[Sequence[int]], var_to_level: Sequence[int]) -> None:
        self._clauses = [tuple(clause) for clause in clauses]
        self.var_to_level = list(var_to_level)

    @staticmethod
    def parse_dimacs(text: str) -> "Cnf":
        """Parse DIMACS CNF text.

        Comment lines whose first token is a number give the variable order:
        the variable named on the first such line is placed at the top.
        """
        var_order: list[int] = []
        pos = 0
        line = 0

        while True:
            line += 1
            if pos >= len(text):
                raise CnfError(f"unexpected end of input at beginning of line {line}")
            c = text[pos]
            end = text.find("\n", pos)
            if end < 0:
                end = len(text)
            if c == "c":
                tokens = text[pos + 1 : end].split()
                if tokens and set(tokens[0]) <= _DIGITS:
                    var_id = int(tokens[0])
                    if var_id == 0:
                        raise CnfError("variable numbers must be > 0 (in variable order)")
                    var_order.append(var_id - 1)
                pos = end + 1
            elif c == "p":
                rest = text[pos + 1 :]
                break
            else:
                raise CnfError(f"unexpected character '{c}' at beginning of line {line}")

        tokens = rest.split()
        header = tokens[:3]
        nvars = _parse_int(header[1]) if len(header) == 3 else None
        nclauses = _parse_int(header[2]) if len(header) == 3 else None
        if nvars is None or nclauses is None or nvars < 0 or nclauses < 0:
            raise CnfError(f"expected `p cnf #vars #clauses` (line {line})")
        if header[0] != "cnf":
            raise CnfError("can only handle 'cnf' files")
        if nvars >= _INT_MAX:
            raise CnfError("too many variables")

        if not var_order:
            var_to_level = list(range(nvars))
        else:
            if nvars != len(var_order):
                raise CnfError("number of variables does not match")
            levels: list[int | None] = [None] * nvars
            for level, var in enumerate(var_order):
                if var >= nvars:
                    raise CnfError(f"variable {var + 1} in order exceeds {nvars} variables")
                if levels[var] is not None:
                    raise CnfError(f"variable {var + 1} occurs twice in order")
                levels[var] = level
            var_to_level = [level for level in levels if level is not None]

        clauses: list[tuple[int, ...]] = []
        current: list[int] = []
        for token in tokens[3:]:
            literal = _parse_int(token)
            if literal is None:
                raise CnfError("expected an integer")
            if literal == 0:
                clauses.append(tuple(current))
                current = []
            elif abs(literal) > nvars:
                raise CnfError(
                    f"found literal {literal} but there are only {nvars} variables"
                )
            else:
                current.append(literal)

        # The final 0 may be omitted; a trailing empty clause may then be implied.
        if current or (nclauses > 0 and len(clauses) == nclauses - 1):
            clauses.append(tuple(current))

        if len(clauses) != nclauses:
            raise CnfError(
                f"number of clauses does not match ({nclauses} in header, "
                f"actual: {len(clauses)})"
            )

        return Cnf(clauses, var_to_level)

    @staticmethod
    def from_file(path) -> "Cnf":
        """Parse a DIMACS CNF file."""
        try:
            with open(path, encoding="utf-8", errors="replace") as handle:
                text = handle.read()
        except OSError as ex:
            raise CnfError(f"reading from the input file failed: {ex}") from ex
        return Cnf.parse_dimacs(text)

    def has_empty_clause(self) -> bool:
        return any(not clause for clause in self._clauses)

    def num_clauses(self) -> int:
        return len(self._clauses)

    def clauses(self) -> Iterator[tuple[int, ...]]:
        """The clauses in file order; literal `l` refers to variable `|l| - 1`."""
        return iter(self._clauses)


class CnfPolicy(ParsingPolicy):
    name = "CNF"
    args = "f:c"
    help_text = (
        "        -c                    Count satisfying assignments\n"
        "        -f PATH               Path to '.cnf'/'.dimacs' file"
    )

    def __init__(self) -> None:
        self.file = ""
        self.satcount = False

    def handle(self, flag: str, arg: str | None) -> None:
        if flag == "f":
            if arg is None or not os.path.exists(arg):
                raise InputError(f"File '{arg}' does not exist")
            if self.file:
                raise InputError("Only one file may be given")
            self.file = arg
        elif flag == "c":
            self.satcount = True
        else:
            raise InputError(f"Unknown option -{flag}")


def construct_clauses(adapter, cnf: Cnf) -> list:
    """Build one decision diagram per clause, bottom-up with the builder.

    Clauses containing both `x` and `-x` are dropped. The CNF must not hold
    an empty clause.
    """
    var_to_level = cnf.var_to_level
    levels = len(var_to_level)
    needs_extend = getattr(adapter, "needs_extend", False)
    result = []

    for clause in cnf.clauses():
        polarities: dict[int, int] = {}
        tautological = False
        for literal in clause:
            level = var_to_level[abs(literal) - 1]
            polarity = -1 if literal < 0 else 1
            if polarities.get(level, polarity) != polarity:
                tautological = True
                break
            polarities[level] = polarity
        if tautological:
            continue
        if not polarities:
            raise ValueError("Cannot construct an empty clause")

        min_level = min(polarities)
        max_level = max(polarities)

        tautology = adapter.build_node(True)
        if needs_extend:
            for level in range(levels - 1, max_level, -1):
                tautology = adapter.build_node(level, tautology, tautology)

        level = max_level
        if polarities[level] == 1:
            built = adapter.build_node(level, adapter.build_node(False), tautology)
        else:
            built = adapter.build_node(level, tautology, adapter.build_node(False))
        if needs_extend and level > min_level:
            tautology = adapter.build_node(level, tautology, tautology)

        for level in range(max_level - 1, -1, -1):
            pol = polarities.get(level, 0)
            if pol == 0:
                if needs_extend:
                    built = adapter.build_node(level, built, built)
            elif pol == 1:
                built = adapter.build_node(level, built, tautology)
            else:
                built = adapter.build_node(level, tautology, built)
            if needs_extend and level > min_level:
                tautology = adapter.build_node(level, tautology, tautology)

        result.append(adapter.build())

    return result


def conjoin(adapter, clauses: Sequence):
    """Conjoin with a balanced bracketing `(c0 & c1) & (c2 & (c3 & c4))`, never reordering."""
    if not clauses:
        return adapter.top()
    if len(clauses) == 1:
        return clauses[0]
    mid = len(clauses) // 2
    return conjoin(adapter, clauses[:mid]) & conjoin(adapter, clauses[mid:])


def run_cnf(argv: list[str], stream: TextIO | None = None) -> int:
    """Run the CNF benchmark; returns the process exit code."""
    out_stream = stream if stream is not None else sys.stdout
    policy = CnfPolicy()
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

    if not policy.file:
        print("Input file not specified", file=sys.stderr)
        return -1

    try:
        cnf = Cnf.from_file(policy.file)
    except CnfError as ex:
        print(f"error: {ex}", file=sys.stderr)
        return -1
    if cnf.has_empty_clause():
        print(
            "The CNF contains an empty clause and is thus trivially unsatisfiable",
            file=sys.stderr,
        )
        return -1

    count_solutions = policy.satcount

    def body(adapter, out) -> int:
        out.field("clauses").brace_open().endl().flush()
        t1 = now()
        clauses = construct_clauses(adapter, cnf)
        t2 = now()
        clause_time = duration_ms(t1, t2)
        out.field("amount").value(len(clauses)).comma().endl()
        out.field("time (ms)").value(clause_time).endl()
        out.brace_close().comma().endl()

        out.field("apply").brace_open().endl().flush()
        t3 = now()
        res = conjoin(adapter, clauses)
        t4 = now()
        apply_time = duration_ms(t3, t4)
        out.field("final size (nodes)").value(adapter.nodecount(res)).comma().endl()
        out.field("time (ms)").value(apply_time).endl()
        out.brace_close().comma().endl().flush()

        counting_time = 0
        if count_solutions:
            out.field("satcount").brace_open().endl().flush()
            t5 = now()
            solutions = adapter.satcount(res)
            t6 = now()
            counting_time = duration_ms(t5, t6)
            out.field("result").value(solutions).comma().endl()
            out.field("time (ms)").value(counting_time).endl()
            out.brace_close().comma().endl().flush()

        total = clause_time + apply_time + counting_time
        out.field("total time (ms)").value(total).endl().flush()
        return 0

    return run("cnf", len(cnf.var_to_level), body, options, out_stream)


def main(argv: list[str] | None = None) -> int:
    return run_cnf(sys.argv[1:] if argv is None else argv)