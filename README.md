# bddbench

Benchmarks for binary decision diagrams (BDDs), run on a small pure-Python
reduced ordered BDD manager. Each benchmark writes a JSON report to standard
output. The report holds the manager's name and type, the number of
variables, the memory figure given with `-M`, and a `benchmark` object with
timings in milliseconds, node counts and satisfying-assignment counts.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Commands

Every command accepts these common options:

| Flag          | Default | Meaning                                       |
|---------------|---------|-----------------------------------------------|
| `-h`          |         | Print usage information and exit             |
| `-M MiB`      | 128     | Memory figure written into the report (MiB)   |
| `-P THREADS`  | 1       | Worker thread count (must be positive)        |
| `-R`          |         | Request dynamic variable reordering           |
| `-T PATH`     |         | Path for temporary files                      |

`-M` and `-P` must be positive integers. An unknown option prints the usage
text, just as `-h` does. Invalid input is reported on standard error and the
command exits with a non-zero status.

### Apply

This benchmark reads two or more BDDs stored in the binary `lib-bdd` format.
It prints shape statistics for each file, rebuilds each BDD in the manager,
and then folds them all together with one Boolean operator.

```
bddbench-apply -f first.bdd -f second.bdd -o and
```

- `-f PATH`: an input file. Give this option at least twice. The file must
  exist.
- `-o OPER`: `and` (or `a`) or `or` (or `o`), in any letter case. The
  default is `and`.

### CNF

This benchmark compiles a DIMACS CNF file into a BDD. It builds one BDD per
clause and drops clauses that contain both `x` and `-x`. It then conjoins
the clauses in a balanced bracketing that never reorders them. A formula
with an empty clause is rejected.

```
bddbench-cnf -f formula.cnf -c
```

- `-f PATH`: the CNF file. Only one file may be given.
- `-c`: also count the satisfying assignments.

Comment lines before the `p cnf` header may fix the variable order. Such a
line starts with `c` and its first token is a variable number, for example
`c 2 b`. The first such line names the top variable. If any order lines are
present, they must name every variable exactly once. Comment lines whose
first token is not a number are ignored. The final `0` after the last clause
may be left out.

### Game of Life

This benchmark searches for Garden-of-Eden states on an `n × m` grid. These
are states that have no predecessor. The search can be limited to states
with a given symmetry.

```
bddbench-game-of-life -n 4 -n 5 -s mirror
```

- `-n N`: the grid size. The first use sets the rows and a second use sets
  the columns. The default is 4 rows, and the number of columns defaults to
  the number of rows.
- `-s SYMMETRY`: one of `none`, `mirror` / `mirror-vertical`,
  `mirror-quadrant` / `mirror-quad`, `mirror-diagonal` / `mirror-diag`,
  `mirror-double_diagonal` / `mirror-double_diag`, `rotate` / `rotate-90`,
  or `rotate-180`. The diagonal and 90-degree symmetries need a square grid.

The command prints a note on standard error when the grid has more columns
than rows, because the variable order is designed for the opposite case. It
exits with status 0 when no Garden-of-Eden state exists and 1 when one does.

## Library use

The modules can also be used directly:

- `bddbench.bdd.BddManager(varcount)`: the BDD manager. It provides `top`,
  `bot`, `ithvar`, `nithvar`, `cube`, the `apply_*` operations, `ite`,
  `exists` and `forall`, `relnext` and `relprev`, `nodecount`, `satcount`,
  `satone`, `pickcube`, and a bottom-up builder (`build_node`, `build`).
  `exists` and `forall` take a single variable, a collection of variables,
  a predicate, or a BDD whose support is used. `Bdd` handles support `&`,
  `|`, `^` and `~`.
- `bddbench.cnf.Cnf.parse_dimacs(text)` and `Cnf.from_file(path)` parse
  CNF input and raise `CnfError` on bad input. `construct_clauses` and
  `conjoin` build the BDD.
- `bddbench.libbdd.deserialize_file(path)` reads `lib-bdd` binaries.
  `stats` summarises their shape, and `remap_vars` with `reconstruct`
  rebuilds them in a manager.
- `bddbench.life_grid` provides `Grid`, `Cell`, `Symmetry` and `VarMap`,
  the cell-to-variable mapping. `bddbench.gameoflife.garden_of_eden` builds
  the set of states that have a predecessor.
- `bddbench.runner.run` wraps a benchmark body in the JSON report.
  `bddbench.jsonout.JsonWriter` writes the JSON piece by piece.

## Limitations

- There is only one decision-diagram backend: the pure-Python BDD manager.
  The package has no zero-suppressed or complement-edge diagrams, and no
  bindings to external BDD libraries.
- `-R` and `-P` are parsed and checked, but they have no effect. The manager
  never reorders variables and always runs in a single thread. `-M` is only
  written into the report and sets no memory limit. `-T` is stored and not
  used.
- Only the apply, CNF and Game of Life benchmarks are included.