"""Streaming writer for the hand-formatted JSON that benchmarks print."""

from __future__ import annotations

from typing import Any, TextIO


def format_value(value: Any) -> str:
    """Render a single JSON value: strings quoted, booleans as true/false."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


class JsonWriter:
    """Writes JSON piece by piece to a text stream, tracking indentation.

    Every method returns the writer itself, so calls can be chained.
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.indent_level = 0

    def write(self, text: str) -> "JsonWriter":
        self.stream.write(text)
        return self

    def endl(self) -> "JsonWriter":
        return self.write("\n")

    def flush(self) -> "JsonWriter":
        self.stream.flush()
        return self

    def comma(self) -> "JsonWriter":
        return self.write(",")

    def nil(self) -> "JsonWriter":
        return self.write("null")

    def indent(self) -> "JsonWriter":
        return self.write(" " * max(0, 2 * self.indent_level))

    def brace_open(self) -> "JsonWriter":
        self.indent_level += 1
        return self.write("{")

    def brace_close(self) -> "JsonWriter":
        self.indent_level -= 1
        return self.indent().write("}")

    def array_open(self) -> "JsonWriter":
        self.indent_level += 1
        return self.write("[")

    def array_close(self) -> "JsonWriter":
        self.indent_level -= 1
        return self.indent().write("]")

    def field(self, name: str) -> "JsonWriter":
        return self.indent().write(f'"{name}": ')

    def value(self, value: Any) -> "JsonWriter":
        return self.write(format_value(value))