"""Reading BDDs serialised in the binary 'lib-bdd' format and rebuilding them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO

from bddbench.jsonout import JsonWriter

TERMINAL_LEVEL = 0xFFFF
FALSE_PTR = 0
TRUE_PTR = 1
NODE_SIZE = 10

_MAX_LEVEL = 0xFFFF
_MAX_PTR = 0xFFFF_FFFF


def from_le_bytes(data: bytes) -> int:
    """Unsigned integer from little-endian bytes."""
    return int.from_bytes(bytes(data), "little", signed=False)


@dataclass(frozen=True)
class Node:
    """One serialised node: a variable level and the indices of its children."""

    level: int
    low: int
    high: int

    def __post_init__(self) -> None:
        if not 0 <= self.level <= _MAX_LEVEL:
            raise OverflowError("Variable level too large")
        if not (0 <= self.low <= _MAX_PTR and 0 <= self.high <= _MAX_PTR):
            raise OverflowError("Child index out of range")

    @staticmethod
    def terminal(value: bool) -> "Node":
        """The `false` or `true` terminal."""
        ptr = TRUE_PTR if value else FALSE_PTR
        return Node(TERMINAL_LEVEL, ptr, ptr)

    @staticmethod
    def from_bytes(data: bytes) -> "Node":
        """Decode a node from its 10 little-endian bytes."""
        if len(data) != NODE_SIZE:
            raise ValueError(f"A node takes exactly {NODE_SIZE} bytes, got {len(data)}")
        return Node(from_le_bytes(data[0:2]), from_le_bytes(data[2:6]), from_le_bytes(data[6:10]))

    def is_terminal(self) -> bool:
        return self.level == TERMINAL_LEVEL

    def is_false(self) -> bool:
        return self.is_terminal() and self.low == FALSE_PTR

    def is_true(self) -> bool:
        return self.is_terminal() and self.low == TRUE_PTR

    def is_internal(self) -> bool:
        return self.level < TERMINAL_LEVEL


@dataclass
class Stats:
    """Shape statistics of a deserialised BDD."""

    size: int = 0
    levels: int = 0
    width: int = 0
    terminals: list[int] = field(default_factory=lambda: [0, 0])
    parent_counts: list[int] = field(default_factory=lambda: [0] * 6)


def deserialize(stream: BinaryIO) -> list[Node]:
    """Parse a lib-bdd binary stream into its list of nodes.

    A trailing chunk shorter than a node is ignored.
    """
    out: list[Node] = []
    pos = 0

    chunk = stream.read(NODE_SIZE)
    if len(chunk) < NODE_SIZE:
        raise ValueError("Error while parsing `false` terminal.")
    pos += NODE_SIZE
    out.append(Node.from_bytes(chunk))

    chunk = stream.read(NODE_SIZE)
    if len(chunk) < NODE_SIZE:
        return out
    pos += NODE_SIZE
    out.append(Node.from_bytes(chunk))

    while True:
        chunk = stream.read(NODE_SIZE)
        if len(chunk) < NODE_SIZE:
            return out

        n = Node.from_bytes(chunk)
        if len(out) <= n.low:
            raise IndexError(f"Low index ( {n.low} ) is out-of-bounds ( pos: {pos} )")
        if len(out) <= n.high:
            raise IndexError(f"High index ( {n.high} ) is out-of-bounds ( pos: {pos} )")

        pos += NODE_SIZE
        out.append(n)


def deserialize_file(path) -> list[Node]:
    """Parse a lib-bdd binary file."""
    with open(path, "rb") as stream:
        return deserialize(stream)


def levelized_order(f: list[Node]) -> list[int]:
    """Indices of the non-terminal slots, deepest level first, ties by index."""
    return sorted(range(2, len(f)), key=lambda i: (-f[i].level, i))


def stats(f: list[Node]) -> Stats:
    """Collect size, level, width, terminal-edge and parent-count statistics."""
    out = Stats(size=len(f))

    curr_level = TERMINAL_LEVEL
    curr_width = 0
    parent_counts = [0] * len(f)

    for index in levelized_order(f):
        n = f[index]

        if n.level != curr_level:
            out.levels += 1
            curr_level = n.level
            curr_width = 0

        curr_width += 1

        if n.is_internal():
            out.terminals[0] += (n.low == FALSE_PTR) + (n.high == FALSE_PTR)
            out.terminals[1] += (n.low == TRUE_PTR) + (n.high == TRUE_PTR)
            out.width = max(out.width, curr_width)
            parent_counts[n.low] += 1
            parent_counts[n.high] += 1

    for pc in parent_counts:
        out.parent_counts[min(pc, 5)] += 1

    return out


def print_json(stats: Stats, writer: JsonWriter) -> None:
    """Write the statistics as JSON fields (no trailing newline)."""
    writer.field("size").value(stats.size).comma().endl()
    writer.field("levels").value(stats.levels).comma().endl()
    writer.field("width").value(stats.width).comma().endl()

    writer.field("terminal_edges").brace_open().endl()
    writer.field("false").value(stats.terminals[0]).comma().endl()
    writer.field("true").value(stats.terminals[1]).endl()
    writer.brace_close().comma().endl()

    writer.field("parent_counts").brace_open().endl()
    labels = ("0", "1", "2", "3", "4", "5+")
    for i, (label, count) in enumerate(zip(labels, stats.parent_counts)):
        writer.field(label).value(count)
        if i < len(labels) - 1:
            writer.comma()
        writer.endl()
    writer.brace_close()


def remap_vars(fs: list[list[Node]]) -> dict[int, int]:
    """Compact the levels used by all BDDs into consecutive variables 0, 1, ..."""
    levels = {n.level for f in fs for n in f[2:] if n.level != TERMINAL_LEVEL}
    return {level: var for var, level in enumerate(sorted(levels))}


def reconstruct(adapter, f: list[Node], var_map: dict[int, int]):
    """Rebuild a deserialised BDD bottom-up with the adapter's builder."""
    if len(f) <= 2:
        adapter.build_node(len(f) == 2)
        return adapter.build()

    built = {FALSE_PTR: adapter.build_node(False), TRUE_PTR: adapter.build_node(True)}

    for index in levelized_order(f):
        n = f[index]
        var = var_map.get(n.level)
        if var is None:
            raise IndexError(f"Unmapped variable level: {n.level}")
        built[index] = adapter.build_node(var, built[n.low], built[n.high])

    return adapter.build()