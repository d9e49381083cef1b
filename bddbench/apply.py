"""Benchmark: combine several lib-bdd files with a single Boolean operator."""

from __future__ import annotations

import os
import sys
from enum import Enum
from functools import reduce
from typing import TextIO

from bddbench import libbdd
from bddbench.chrono import duration_ms, now
from bddbench.cli import HelpRequested, InputError, ParsingPolicy, ascii_tolower, parse_input
from bddbench.runner import run


class Operand(Enum):
    AND = "and"
    OR = "or"

    @staticmethod
    def parse(text: str) -> "Operand":
        lower = ascii_tolower(text)
        if lower in ("and", "a"):
            return Operand.AND
        if lower in ("or", "o"):
            return Operand.OR
        raise InputError(f"Undefined operand: {text}")


class ApplyPolicy(ParsingPolicy):
    name = "Apply"
    args = "f:o:"
    help_text = (
        "        -f PATH               Path to '._dd' files (2+ required)\n"
        "        -o OPER      [and]    Boolean operator to use (and/or)"
    )

    def __init__(self) -> None:
        self.inputs: list[str] = []
        self.operand = Operand.AND

    def handle(self, flag: str, arg: str | None) -> None:
        if flag == "f":
            if arg is None or not os.path.exists(arg):
                raise InputError(f"File '{arg}' does not exist")
            self.inputs.append(arg)
        elif flag == "o":
            self.operand = Operand.parse(arg or "")
        else:
            raise InputError(f"Unknown option -{flag}")


def combine(dds: list, operand: Operand):
    """Fold all decision diagrams together with the operator, starting from the first."""
    if not dds:
        raise ValueError("Nothing to combine")
    if operand is Operand.AND:
        return reduce(lambda acc, dd: acc & dd, dds, dds[0])
    return reduce(lambda acc, dd: acc | dd, dds, dds[0])


def run_apply(argv: list[str], stream: TextIO | None = None) -> int:
    """Run the apply benchmark; returns the process exit code."""
    out_stream = stream if stream is not None else sys.stdout
    policy = ApplyPolicy()
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

    paths = policy.inputs
    if len(paths) < 2:
        print("Not enough files provided for binary operation (2+ required)", file=sys.stderr)
        return -1

    inputs_binary = [libbdd.deserialize_file(path) for path in paths]
    vm = libbdd.remap_vars(inputs_binary)
    operand = policy.operand

    def body(adapter, out) -> int:
        out.field("inputs").array_open().endl()
        for i, (path, f) in enumerate(zip(paths, inputs_binary)):
            out.indent().brace_open().endl()
            out.field("path").value(path).comma().endl()
            libbdd.print_json(libbdd.stats(f), out)
            out.comma().endl()
            out.brace_close()
            if i < len(paths) - 1:
                out.comma()
            out.endl()
        out.array_close().comma().endl().endl()

        inputs_dd = []
        total_time = 0

        out.field("rebuild").array_open().endl().flush()
        for i, (path, f) in enumerate(zip(paths, inputs_binary)):
            t_before = now()
            dd = libbdd.reconstruct(adapter, f, vm)
            t_after = now()
            inputs_dd.append(dd)

            load_time = duration_ms(t_before, t_after)
            total_time += load_time

            out.indent().brace_open().endl()
            out.field("path").value(path).comma().endl()
            out.field("size (nodes)").value(adapter.nodecount(dd)).comma().endl()
            out.field("satcount").value(adapter.satcount(dd)).comma().endl()
            out.field("time (ms)").value(load_time).endl()
            out.brace_close()
            if i < len(paths) - 1:
                out.comma()
            out.endl()
        inputs_binary.clear()
        out.array_close().comma().endl()

        out.field("apply").brace_open().endl().flush()
        t_before = now()
        result = combine(inputs_dd, operand)
        t_after = now()
        apply_time = duration_ms(t_before, t_after)
        total_time += apply_time

        out.field("operand").value(operand.value).comma().endl()
        out.field("operations").value(len(inputs_dd) - 1).comma().endl()
        out.field("size (nodes)").value(adapter.nodecount(result)).comma().endl()
        out.field("satcount").value(adapter.satcount(result)).comma().endl()
        out.field("time (ms)").value(apply_time).endl()
        out.brace_close().comma().endl()

        out.field("total time (ms)").value(total_time).endl()
        return 0

    return run("apply", len(vm), body, options, out_stream)


def main(argv: list[str] | None = None) -> int:
    return run_apply(sys.argv[1:] if argv is None else argv)