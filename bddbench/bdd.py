"""A small reduced ordered BDD package with the operations the benchmarks use."""

from __future__ import annotations

from typing import Callable, Iterable, Union

_FALSE = 0
_TRUE = 1

_TERMINAL_OPS: dict[str, Callable[[bool, bool], bool]] = {
    "and": lambda a, b: a and b,
    "or": lambda a, b: a or b,
    "xor": lambda a, b: a != b,
    "xnor": lambda a, b: a == b,
    "diff": lambda a, b: a and not b,
    "imp": lambda a, b: (not a) or b,
}

Variables = Union[int, Iterable[int], Callable[[int], bool], "Bdd"]


class Bdd:
    """A handle to a node of a BddManager; equal functions have equal handles."""

    __slots__ = ("manager", "node")

    def __init__(self, manager: "BddManager", node: int) -> None:
        self.manager = manager
        self.node = node

    def __and__(self, other: "Bdd") -> "Bdd":
        return self.manager.apply_and(self, other)

    def __or__(self, other: "Bdd") -> "Bdd":
        return self.manager.apply_or(self, other)

    def __xor__(self, other: "Bdd") -> "Bdd":
        return self.manager.apply_xor(self, other)

    def __invert__(self) -> "Bdd":
        return self.manager.apply_xor(self, self.manager.top())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bdd):
            return NotImplemented
        return self.manager is other.manager and self.node == other.node

    def __hash__(self) -> int:
        return hash((id(self.manager), self.node))

    def __repr__(self) -> str:
        return f"Bdd(node={self.node})"


class BddManager:
    """Unique table, operation caches and a builder for bottom-up construction."""

    name = "bddbench"
    dd = "BDD"
    needs_extend = False
    needs_frame_rule = True
    complement_edges = False

    def __init__(self, varcount: int) -> None:
        if varcount < 0:
            raise ValueError("Number of variables must be non-negative")
        self.varcount = varcount
        self._var = [varcount, varcount]
        self._low = [_FALSE, _TRUE]
        self._high = [_FALSE, _TRUE]
        self._unique: dict[tuple[int, int, int], int] = {}
        self._apply_cache: dict[tuple[str, int, int], int] = {}
        self._quant_cache: dict[tuple[str, int, frozenset[int]], int] = {}
        self._latest_build = self.bot()

    # ------------------------------------------------------------------ internals

    def _wrap(self, node: int) -> Bdd:
        return Bdd(self, node)

    def _unwrap(self, f: Bdd) -> int:
        if f.manager is not self:
            raise ValueError("BDD belongs to a different manager")
        return f.node

    def _check_var(self, i: int) -> int:
        if not 0 <= i < self.varcount:
            raise IndexError(f"Variable {i} out of range (0..{self.varcount - 1})")
        return i

    def _make(self, var: int, low: int, high: int) -> int:
        if low == high:
            return low
        key = (var, low, high)
        node = self._unique.get(key)
        if node is None:
            node = len(self._var)
            self._var.append(var)
            self._low.append(low)
            self._high.append(high)
            self._unique[key] = node
        return node

    def _apply(self, op: str, u: int, v: int) -> int:
        if u < 2 and v < 2:
            return _TRUE if _TERMINAL_OPS[op](u == _TRUE, v == _TRUE) else _FALSE
        if op == "and":
            if u == _FALSE or v == _FALSE:
                return _FALSE
            if u == _TRUE or u == v:
                return v
            if v == _TRUE:
                return u
        elif op == "or":
            if u == _TRUE or v == _TRUE:
                return _TRUE
            if u == _FALSE or u == v:
                return v
            if v == _FALSE:
                return u
        key = (op, u, v)
        cached = self._apply_cache.get(key)
        if cached is not None:
            return cached
        lu, lv = self._var[u], self._var[v]
        top = min(lu, lv)
        u0, u1 = (self._low[u], self._high[u]) if lu == top else (u, u)
        v0, v1 = (self._low[v], self._high[v]) if lv == top else (v, v)
        res = self._make(top, self._apply(op, u0, v0), self._apply(op, u1, v1))
        self._apply_cache[key] = res
        return res

    def _not(self, u: int) -> int:
        return self._apply("xor", u, _TRUE)

    def _ite(self, f: int, g: int, h: int) -> int:
        return self._apply("or", self._apply("and", f, g), self._apply("and", self._not(f), h))

    def _var_node(self, i: int) -> int:
        return self._make(self._check_var(i), _FALSE, _TRUE)

    def _variable_set(self, variables: Variables) -> frozenset[int]:
        if isinstance(variables, Bdd):
            return frozenset(self._support(self._unwrap(variables)))
        if isinstance(variables, int):
            return frozenset({self._check_var(variables)})
        if callable(variables):
            return frozenset(i for i in range(self.varcount) if variables(i))
        return frozenset(self._check_var(i) for i in variables)

    def _support(self, u: int) -> set[int]:
        seen: set[int] = set()
        out: set[int] = set()
        stack = [u]
        while stack:
            n = stack.pop()
            if n < 2 or n in seen:
                continue
            seen.add(n)
            out.add(self._var[n])
            stack.extend((self._low[n], self._high[n]))
        return out

    def _quantify(self, combine: str, u: int, vs: frozenset[int], top_var: int) -> int:
        if u < 2 or self._var[u] > top_var:
            return u
        key = (combine, u, vs)
        cached = self._quant_cache.get(key)
        if cached is not None:
            return cached
        lo = self._quantify(combine, self._low[u], vs, top_var)
        hi = self._quantify(combine, self._high[u], vs, top_var)
        var = self._var[u]
        res = self._apply(combine, lo, hi) if var in vs else self._ite(self._var_node(var), hi, lo)
        self._quant_cache[key] = res
        return res

    def _quant(self, combine: str, f: Bdd, variables: Variables) -> Bdd:
        vs = self._variable_set(variables)
        u = self._unwrap(f)
        if not vs:
            return f
        return self._wrap(self._quantify(combine, u, vs, max(vs)))

    def _replace(self, u: int, mapping: dict[int, int], memo: dict[int, int]) -> int:
        if u < 2:
            return u
        done = memo.get(u)
        if done is not None:
            return done
        lo = self._replace(self._low[u], mapping, memo)
        hi = self._replace(self._high[u], mapping, memo)
        var = self._var[u]
        res = self._ite(self._var_node(mapping.get(var, var)), hi, lo)
        memo[u] = res
        return res

    # ------------------------------------------------------------------ operations

    def top(self) -> Bdd:
        return self._wrap(_TRUE)

    def bot(self) -> Bdd:
        return self._wrap(_FALSE)

    def ithvar(self, i: int) -> Bdd:
        return self._wrap(self._var_node(i))

    def nithvar(self, i: int) -> Bdd:
        return self._wrap(self._make(self._check_var(i), _TRUE, _FALSE))

    def cube(self, variables: Variables) -> Bdd:
        """Conjunction of the positive literals of the given variables."""
        res = _TRUE
        for i in sorted(self._variable_set(variables), reverse=True):
            res = self._make(i, _FALSE, res)
        return self._wrap(res)

    def apply_and(self, f: Bdd, g: Bdd) -> Bdd:
        return self._wrap(self._apply("and", self._unwrap(f), self._unwrap(g)))

    def apply_or(self, f: Bdd, g: Bdd) -> Bdd:
        return self._wrap(self._apply("or", self._unwrap(f), self._unwrap(g)))

    def apply_diff(self, f: Bdd, g: Bdd) -> Bdd:
        return self._wrap(self._apply("diff", self._unwrap(f), self._unwrap(g)))

    def apply_imp(self, f: Bdd, g: Bdd) -> Bdd:
        return self._wrap(self._apply("imp", self._unwrap(f), self._unwrap(g)))

    def apply_xor(self, f: Bdd, g: Bdd) -> Bdd:
        return self._wrap(self._apply("xor", self._unwrap(f), self._unwrap(g)))

    def apply_xnor(self, f: Bdd, g: Bdd) -> Bdd:
        return self._wrap(self._apply("xnor", self._unwrap(f), self._unwrap(g)))

    def ite(self, f: Bdd, g: Bdd, h: Bdd) -> Bdd:
        return self._wrap(self._ite(self._unwrap(f), self._unwrap(g), self._unwrap(h)))

    def exists(self, f: Bdd, variables: Variables) -> Bdd:
        """Existentially quantify a variable, a collection of them or those matching a predicate."""
        return self._quant("or", f, variables)

    def forall(self, f: Bdd, variables: Variables) -> Bdd:
        """Universally quantify a variable, a collection of them or those matching a predicate."""
        return self._quant("and", f, variables)

    def relnext(self, states: Bdd, rel: Bdd, rel_support: Bdd | None = None) -> Bdd:
        """Successor states: even variables are current, odd ones next."""
        even = range(0, self.varcount, 2)
        product = self.exists(self.apply_and(states, rel), even)
        pairs = {i + 1: i for i in range(self.varcount - 2, -1, -2)}
        return self._wrap(self._replace(product.node, pairs, {}))

    def relprev(self, states: Bdd, rel: Bdd, rel_support: Bdd | None = None) -> Bdd:
        """Predecessor states: even variables are current, odd ones next."""
        pairs = {i: i + 1 for i in range(self.varcount - 2, -1, -2)}
        shifted = self._wrap(self._replace(self._unwrap(states), pairs, {}))
        odd = range(1, self.varcount, 2)
        return self.exists(self.apply_and(shifted, rel), odd)

    def nodecount(self, f: Bdd) -> int:
        """Number of nodes, terminals included."""
        seen: set[int] = set()
        stack = [self._unwrap(f)]
        while stack:
            n = stack.pop()
            if n < 2 or n in seen:
                continue
            seen.add(n)
            stack.extend((self._low[n], self._high[n]))
        return 1 if not seen else len(seen) + 2

    def satcount(self, f: Bdd, varcount: int | None = None) -> int:
        """Number of satisfying assignments to the first `varcount` variables."""
        vc = self.varcount if varcount is None else varcount
        if not 0 <= vc <= self.varcount:
            raise ValueError(f"Cannot count over {vc} of {self.varcount} variables")
        memo: dict[int, int] = {}

        def count(u: int) -> int:
            if u < 2:
                return u
            done = memo.get(u)
            if done is not None:
                return done
            lo, hi = self._low[u], self._high[u]
            var = self._var[u]
            res = count(lo) * 2 ** (self._var[lo] - var - 1) + count(hi) * 2 ** (
                self._var[hi] - var - 1
            )
            memo[u] = res
            return res

        u = self._unwrap(f)
        total = count(u) * 2 ** self._var[u] if u >= 2 else u * 2**self.varcount
        return total // 2 ** (self.varcount - vc)

    def satone(self, f: Bdd) -> Bdd:
        """A cube of one satisfying path, preferring low branches."""

        def walk(u: int) -> int:
            if u < 2:
                return u
            var = self._var[u]
            if self._low[u] == _FALSE:
                return self._make(var, _FALSE, walk(self._high[u]))
            return self._make(var, walk(self._low[u]), _FALSE)

        return self._wrap(walk(self._unwrap(f)))

    def pickcube(self, f: Bdd) -> list[tuple[int, str]]:
        """One satisfying path as (variable, '0' or '1') pairs."""
        res: list[tuple[int, str]] = []
        sat = self.satone(f).node
        while sat >= 2:
            go_high = self._high[sat] != _FALSE
            res.append((self._var[sat], "1" if go_high else "0"))
            sat = self._high[sat] if go_high else self._low[sat]
        return res

    # ------------------------------------------------------------------ builder

    def build_node(self, *args) -> Bdd:
        """`build_node(value)` gives a terminal; `build_node(label, low, high)` a node."""
        if len(args) == 1:
            res = self.top() if args[0] else self.bot()
            if self._latest_build == self.bot():
                self._latest_build = res
            return res
        if len(args) == 3:
            label, low, high = args
            self._latest_build = self.ite(self.ithvar(label), high, low)
            return self._latest_build
        raise TypeError("build_node takes either (value) or (label, low, high)")

    def build(self) -> Bdd:
        """The most recently built node; resets the builder."""
        res = self._latest_build
        self._latest_build = self.bot()
        return res

    def allocated_nodes(self) -> int:
        return len(self._var)