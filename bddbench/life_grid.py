"""Board geometry, cells and the cell-to-variable mapping for Game of Life."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bddbench.cli import InputError, ascii_tolower

PRE = False
POST = True


class Symmetry(Enum):
    """Restriction of the solution space to boards with a given symmetry."""

    NONE = "None"
    MIRROR_VERTICAL = "Mirror (Vertical)"
    MIRROR_DIAGONAL = "Mirror (Diagonal)"
    MIRROR_DOUBLE_DIAGONAL = "Mirror (Double Diagonal)"
    MIRROR_QUADRANT = "Mirror (Quadrant)"
    ROTATE_90 = "Rotate 90°"
    ROTATE_180 = "Rotate 180°"

    def __str__(self) -> str:
        return self.value

    @staticmethod
    def parse(text: str) -> "Symmetry":
        """Symmetry from its command-line name (case-insensitive)."""
        found = _SYMMETRY_NAMES.get(ascii_tolower(text))
        if found is None:
            raise InputError(f"Undefined symmetry: {text}")
        return found


_SYMMETRY_NAMES = {
    "none": Symmetry.NONE,
    "mirror": Symmetry.MIRROR_VERTICAL,
    "mirror-vertical": Symmetry.MIRROR_VERTICAL,
    "mirror-quadrant": Symmetry.MIRROR_QUADRANT,
    "mirror-quad": Symmetry.MIRROR_QUADRANT,
    "mirror-diagonal": Symmetry.MIRROR_DIAGONAL,
    "mirror-diag": Symmetry.MIRROR_DIAGONAL,
    "mirror-double_diagonal": Symmetry.MIRROR_DOUBLE_DIAGONAL,
    "mirror-double_diag": Symmetry.MIRROR_DOUBLE_DIAGONAL,
    "rotate": Symmetry.ROTATE_90,
    "rotate-90": Symmetry.ROTATE_90,
    "rotate-180": Symmetry.ROTATE_180,
}


@dataclass(frozen=True, order=True)
class Cell:
    """A board coordinate before (pre) or after (post) one transition.

    Cells order row-major, with primality breaking ties.
    """

    row: int
    col: int
    prime: bool = PRE

    def with_prime(self, prime: bool) -> "Cell":
        """The same coordinate with another primality (not range-checked)."""
        return Cell(self.row, self.col, prime)

    def vertical_dist_to(self, other: "Cell") -> int:
        return abs(self.row - other.row)

    def horizontal_dist_to(self, other: "Cell") -> int:
        return abs(self.col - other.col)

    def in_neighbourhood(self, other: "Cell") -> bool:
        """Whether `other` lies in the 3x3 block around this cell."""
        return self.vertical_dist_to(other) <= 1 and self.horizontal_dist_to(other) <= 1

    def is_neighbour(self, other: "Cell") -> bool:
        """Whether `other` is a neighbour, i.e. in the block but not this position."""
        if self.same_position(other):
            return False
        return self.in_neighbourhood(other)

    def neighbourhood(self) -> list["Cell"]:
        """The nine unprimed cells of the block around this primed cell, row-major."""
        if self.prime != POST:
            raise ValueError("Neighbourhood is only defined for primed cells")
        return [
            Cell(self.row + dr, self.col + dc, PRE)
            for dr in (-1, 0, 1)
            for dc in (-1, 0, 1)
        ]

    def same_position(self, other: "Cell") -> bool:
        """Whether both cells refer to the same coordinate, ignoring primality."""
        return self.row == other.row and self.col == other.col

    def __str__(self) -> str:
        r = chr(ord("0") + self.row)
        c = chr(ord("A") + self.col - 1)
        p = "'" if self.prime == POST else " "
        return r + c + p


@dataclass(frozen=True)
class Grid:
    """An `n_rows` x `n_cols` board; unprimed cells include a one-cell border."""

    n_rows: int
    n_cols: int

    def __post_init__(self) -> None:
        if self.n_rows <= 0 or self.n_cols <= 0:
            raise ValueError("Grid dimensions must be positive")

    def rows(self, prime: bool = PRE) -> int:
        return self.n_rows + 2 * (not prime)

    def cols(self, prime: bool = PRE) -> int:
        return self.n_cols + 2 * (not prime)

    def min_row(self, prime: bool = PRE) -> int:
        return int(prime)

    def max_row(self, prime: bool = PRE) -> int:
        return self.rows(prime) - (not prime)

    def min_col(self, prime: bool = PRE) -> int:
        return int(prime)

    def max_col(self, prime: bool = PRE) -> int:
        return self.cols(prime) - (not prime)

    def is_square(self) -> bool:
        return self.rows() == self.cols()

    def contains(self, cell: Cell) -> bool:
        """Whether the cell is a valid position for its primality."""
        p = cell.prime
        return (
            self.min_row(p) <= cell.row <= self.max_row(p)
            and self.min_col(p) <= cell.col <= self.max_col(p)
        )

    def cell(self, row: int, col: int, prime: bool = PRE) -> Cell:
        """A range-checked cell."""
        c = Cell(row, col, prime)
        if not self.contains(c):
            raise IndexError("Cell not within valid boundaries")
        return c


class VarMap:
    """Mapping between cells and decision diagram variables.

    Variables follow a row-major order. With a symmetry, all unprimed cells
    of a symmetry class come together and share one primed variable.
    """

    def __init__(self, grid: Grid, symmetry: Symmetry = Symmetry.NONE) -> None:
        self.grid = grid
        self.symmetry = symmetry
        self._map: dict[Cell, int] = {}
        self._counts = [0, 0]
        self._next = 0

        g = grid
        odd_cols = g.cols(PRE) % 2 == 1
        self._mid_col = g.min_col(PRE) + g.cols(PRE) // 2 - (not odd_cols)
        odd_rows = g.rows(PRE) % 2 == 1
        self._mid_row = g.min_row(PRE) + g.rows(PRE) // 2 - (not odd_rows)

        builders = {
            Symmetry.NONE: self._build_none,
            Symmetry.MIRROR_VERTICAL: self._build_mirror_vertical,
            Symmetry.MIRROR_DIAGONAL: self._build_mirror_diagonal,
            Symmetry.MIRROR_DOUBLE_DIAGONAL: self._build_mirror_double_diagonal,
            Symmetry.MIRROR_QUADRANT: self._build_mirror_quadrant,
            Symmetry.ROTATE_90: self._build_rotate_90,
            Symmetry.ROTATE_180: self._build_rotate_180,
        }
        builders[symmetry]()

        self._inv: list[Cell | None] = [None] * self._next
        for cell, x in self._map.items():
            if self._inv[x] is None:
                self._inv[x] = cell

    # ------------------------------------------------------------ construction

    def _new_var(self, prime: bool) -> int:
        x = self._next
        self._next += 1
        self._counts[int(prime)] += 1
        return x

    def _add_pre(self, *cells: Cell) -> None:
        for c in cells:
            x = self._new_var(PRE)
            self._map.setdefault(c, x)

    def _add_post(self, anchor: Cell, cells: list[Cell]) -> None:
        if not self.grid.contains(anchor.with_prime(POST)):
            return
        x = self._new_var(POST)
        for c in cells:
            self._map.setdefault(c.with_prime(POST), x)

    def _require_square(self, what: str) -> None:
        if not self.grid.is_square():
            raise ValueError(f"{what} is only available for square grids.")

    def _build_none(self) -> None:
        g = self.grid
        for row in range(g.min_row(PRE), g.max_row(PRE) + 1):
            for col in range(g.min_col(PRE), g.max_col(PRE) + 1):
                pre = g.cell(row, col, PRE)
                self._add_pre(pre)
                self._add_post(pre, [pre])

    def _build_mirror_vertical(self) -> None:
        g = self.grid
        for row in range(g.min_row(PRE), g.max_row(PRE) + 1):
            for left_col in range(g.min_col(PRE), self._mid_col + 1):
                right_col = g.max_col(PRE) - left_col
                add_mirror = self._mid_col < right_col

                pre_left = g.cell(row, left_col, PRE)
                pre_right = g.cell(row, right_col, PRE)
                self._add_pre(pre_left)
                if add_mirror:
                    self._add_pre(pre_right)

                self._add_post(pre_left, [pre_left, pre_right] if add_mirror else [pre_left])

    def _build_mirror_diagonal(self) -> None:
        self._require_square("Diagonal symmetry")
        g = self.grid
        for row in range(g.min_row(PRE), g.max_row(PRE) + 1):
            max_col = g.max_col(PRE) - (g.max_row(PRE) - row)
            for col in range(g.min_col(PRE), max_col + 1):
                add_mirror = col < row

                pre_mirror = g.cell(col, row, PRE)
                if add_mirror:
                    self._add_pre(pre_mirror)
                pre = g.cell(row, col, PRE)
                self._add_pre(pre)

                self._add_post(pre, [pre_mirror, pre] if add_mirror else [pre])

    def _build_mirror_double_diagonal(self) -> None:
        self._require_square("Diagonal symmetry")
        g = self.grid
        max_r = g.max_row(PRE)
        max_c = g.max_col(PRE)
        for row in range(g.min_row(PRE), max_r + 1):
            max_col = min(row, max_c - row)
            for col in range(0, max_col + 1):
                pre_a = g.cell(row, col, PRE)
                b_row, b_col = max_r - row, max_c - col
                orbit = {
                    pre_a,
                    g.cell(b_row, b_col, PRE),
                    g.cell(b_col, b_row, PRE),
                    g.cell(col, row, PRE),
                }
                pre_cells = sorted(orbit)
                self._add_pre(*pre_cells)
                self._add_post(pre_a, pre_cells)

    def _build_mirror_quadrant(self) -> None:
        g = self.grid
        for top_row in range(self._mid_row, g.min_row(PRE) - 1, -1):
            for left_col in range(self._mid_col, g.min_col(PRE) - 1, -1):
                right_col = g.max_col(PRE) - left_col
                bot_row = g.max_row(PRE) - top_row

                mirror_horizontal = self._mid_row < bot_row
                mirror_vertical = self._mid_col < right_col

                pre = g.cell(top_row, left_col, PRE)
                cells = [pre]
                if mirror_vertical:
                    cells.append(g.cell(top_row, right_col, PRE))
                if mirror_horizontal:
                    cells.append(g.cell(bot_row, left_col, PRE))
                if mirror_horizontal and mirror_vertical:
                    cells.append(g.cell(bot_row, right_col, PRE))

                self._add_pre(*cells)
                self._add_post(pre, cells)

    def _build_rotate_90(self) -> None:
        self._require_square("Rotational symmetry (90 degrees)")
        g = self.grid
        mid_row, mid_col = self._mid_row, self._mid_col
        max_r, max_c = g.max_row(PRE), g.max_col(PRE)
        for tl_row in range(mid_row, g.min_row(PRE) - 1, -1):
            for tl_col in range(mid_col, g.min_col(PRE) - 1, -1):
                pre_tl = g.cell(tl_row, tl_col, PRE)
                cells = [pre_tl]

                tr_row, tr_col = tl_col, max_c - tl_row
                pre_tr = g.cell(tr_row, tr_col, PRE)
                if tr_row <= mid_row and mid_col < tr_col:
                    cells.append(pre_tr)

                bl_row, bl_col = max_r - tl_col, tl_row
                pre_bl = g.cell(bl_row, bl_col, PRE)
                if mid_row < bl_row and bl_col <= mid_col:
                    cells.append(pre_bl)

                br_row, br_col = max_r - tl_row, max_c - tl_col
                pre_br = g.cell(br_row, br_col, PRE)
                if mid_row < br_row and mid_col < br_col:
                    cells.append(pre_br)

                self._add_pre(*cells)
                self._add_post(pre_tl, cells)

    def _build_rotate_180(self) -> None:
        g = self.grid
        for top_row in range(self._mid_row, g.min_row(PRE) - 1, -1):
            for top_col in range(g.min_col(PRE), g.max_col(PRE) + 1):
                bot_row = g.max_row(PRE) - top_row
                bot_col = g.max_col(PRE) - top_col
                add_bot = top_row < bot_row

                pre_top = g.cell(top_row, top_col, PRE)
                cells = [pre_top]
                if add_bot:
                    cells.append(g.cell(bot_row, bot_col, PRE))

                self._add_pre(*cells)
                self._add_post(pre_top, cells)

    # ------------------------------------------------------------ queries

    def var_from_cell(self, cell: Cell) -> int:
        """The variable of a cell."""
        if not self.grid.contains(cell):
            raise IndexError("Cell not within valid boundaries")
        x = self._map.get(cell)
        if x is None:
            raise IndexError("Cell not found in 'cell -> var' map")
        return x

    def cell_from_var(self, x: int, candidate: Cell | None = None) -> Cell:
        """A cell of variable `x`, preferring `candidate` if it maps to `x`.

        Without a candidate, a primed variable shared by several cells gives
        the first of them that was mapped.
        """
        if candidate is not None and self.var_from_cell(candidate) == x:
            return candidate
        if not 0 <= x < len(self._inv):
            raise IndexError(f"Variable {x} out of range")
        cell = self._inv[x]
        if cell is None:
            raise IndexError(f"Variable {x} has no cell")
        return cell

    def __getitem__(self, key: Cell | int):
        if isinstance(key, Cell):
            return self.var_from_cell(key)
        return self.cell_from_var(key)

    def varcount(self, prime: bool | None = None) -> int:
        """Number of variables of the given primality, or of both."""
        if prime is None:
            return self._counts[0] + self._counts[1]
        return self._counts[int(prime)]

    def size(self) -> int:
        """Number of cell-to-variable mappings."""
        return len(self._map)

    def row_symmetric(self, cell: Cell, row: int) -> bool:
        """Whether `cell` is symmetric to a cell on `row` (an under-approximation)."""
        if cell.row == row:
            return True

        row_flipped = self.grid.max_row(POST) - cell.row
        sym = self.symmetry
        if sym in (Symmetry.NONE, Symmetry.MIRROR_VERTICAL):
            return False
        if sym is Symmetry.MIRROR_DIAGONAL:
            return cell.row < cell.col and cell.col == row
        if sym in (
            Symmetry.MIRROR_DOUBLE_DIAGONAL,
            Symmetry.MIRROR_QUADRANT,
            Symmetry.ROTATE_180,
        ):
            return row_flipped == row
        if sym is Symmetry.ROTATE_90:
            return cell.col == row or cell.row == row_flipped or cell.col == row_flipped
        return False

    def describe(self) -> str:
        """One `cell -> variable` line per cell, row-major, each pre before its post."""
        g = self.grid
        lines = []
        for row in range(g.min_row(PRE), g.max_row(PRE) + 1):
            for col in range(g.min_col(PRE), g.max_col(PRE) + 1):
                pre = Cell(row, col, PRE)
                lines.append(f"{pre} -> {self.var_from_cell(pre)}\n")
                post = pre.with_prime(POST)
                if g.contains(post):
                    lines.append(f"{post} -> {self.var_from_cell(post)}\n")
        return "".join(lines)