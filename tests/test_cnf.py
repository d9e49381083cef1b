import io
import itertools
import json
from functools import reduce

import pytest

from bddbench.bdd import BddManager
from bddbench.cnf import Cnf, CnfError, CnfPolicy, conjoin, construct_clauses, run_cnf
from bddbench.cli import InputError

DOC_EXAMPLE = """c 2 b
c 1 a
c 3 c
c 4 d
p cnf 4 4
-1 2 0
-2 1 0
3 0
-4 0
"""


def brute_force_count(cnf):
    nvars = len(cnf.var_to_level)
    clauses = list(cnf.clauses())
    count = 0
    for bits in itertools.product([False, True], repeat=nvars):
        if all(any(bits[abs(l) - 1] == (l > 0) for l in c) for c in clauses):
            count += 1
    return count


def literal_disjunction(mgr, cnf, clause):
    parts = []
    for lit in clause:
        level = cnf.var_to_level[abs(lit) - 1]
        parts.append(mgr.ithvar(level) if lit > 0 else mgr.nithvar(level))
    return reduce(lambda a, b: a | b, parts)


class ExtendingManager(BddManager):
    needs_extend = True


def test_parse_documented_example():
    cnf = Cnf.parse_dimacs(DOC_EXAMPLE)
    assert cnf.var_to_level == [1, 0, 2, 3]
    assert list(cnf.clauses()) == [(-1, 2), (-2, 1), (3,), (-4,)]
    assert cnf.num_clauses() == 4
    assert not cnf.has_empty_clause()


def test_parse_without_order_is_identity():
    cnf = Cnf.parse_dimacs("p cnf 3 2\n1 -3 0\n2 0\n")
    assert cnf.var_to_level == [0, 1, 2]
    assert list(cnf.clauses()) == [(1, -3), (2,)]


def test_non_numeric_comment_ignored():
    cnf = Cnf.parse_dimacs("c hello world\np cnf 2 1\n1 2 0\n")
    assert cnf.var_to_level == [0, 1]


def test_final_zero_may_be_omitted():
    cnf = Cnf.parse_dimacs("p cnf 2 2\n1 0\n-2")
    assert list(cnf.clauses()) == [(1,), (-2,)]


def test_empty_clause_detected():
    cnf = Cnf.parse_dimacs("p cnf 2 2\n0\n1 2 0\n")
    assert cnf.has_empty_clause()


def test_implied_trailing_empty_clause():
    cnf = Cnf.parse_dimacs("p cnf 2 2\n1 0\n")
    assert cnf.num_clauses() == 2
    assert cnf.has_empty_clause()


def test_from_file_roundtrip(tmp_path):
    path = tmp_path / "f.cnf"
    path.write_text(DOC_EXAMPLE)
    assert list(Cnf.from_file(path).clauses()) == list(Cnf.parse_dimacs(DOC_EXAMPLE).clauses())


def test_from_missing_file(tmp_path):
    with pytest.raises(CnfError):
        Cnf.from_file(tmp_path / "missing.cnf")


@pytest.mark.parametrize("manager_cls", [BddManager, ExtendingManager])
def test_construct_clauses_match_disjunction(manager_cls):
    cnf = Cnf.parse_dimacs(DOC_EXAMPLE)
    mgr = manager_cls(4)
    built = construct_clauses(mgr, cnf)
    expected = [literal_disjunction(mgr, cnf, c) for c in cnf.clauses()]
    assert built == expected


def test_tautological_clause_filtered():
    cnf = Cnf.parse_dimacs("p cnf 2 2\n1 -1 0\n2 0\n")
    mgr = BddManager(2)
    built = construct_clauses(mgr, cnf)
    assert built == [mgr.ithvar(1)]


def test_conjoin_empty_is_top():
    mgr = BddManager(2)
    assert conjoin(mgr, []) == mgr.top()


def test_conjoin_matches_fold():
    mgr = BddManager(5)
    dds = [mgr.ithvar(i) | mgr.nithvar((i + 1) % 5) for i in range(5)]
    assert conjoin(mgr, dds) == reduce(lambda a, b: a & b, dds)


def test_conjunction_count_matches_brute_force():
    cnf = Cnf.parse_dimacs("p cnf 4 3\n1 2 0\n-2 3 -4 0\n-1 4 0\n")
    mgr = BddManager(4)
    res = conjoin(mgr, construct_clauses(mgr, cnf))
    assert mgr.satcount(res) == brute_force_count(cnf)


def test_policy_options(tmp_path):
    path = tmp_path / "a.cnf"
    path.write_text("p cnf 1 1\n1 0\n")
    policy = CnfPolicy()
    policy.handle("c", None)
    policy.handle("f", str(path))
    assert policy.satcount is True
    assert policy.file == str(path)
    with pytest.raises(InputError):
        policy.handle("f", str(path))
    with pytest.raises(InputError):
        CnfPolicy().handle("f", str(tmp_path / "nope.cnf"))


def test_run_cnf_reports_json(tmp_path):
    path = tmp_path / "doc.cnf"
    path.write_text(DOC_EXAMPLE)
    out = io.StringIO()
    assert run_cnf(["-f", str(path), "-c"], out) == 0
    report = json.loads(out.getvalue())
    bench = report["benchmark"]
    assert bench["name"] == "cnf"
    assert bench["clauses"]["amount"] == 4
    assert bench["satcount"]["result"] == brute_force_count(Cnf.parse_dimacs(DOC_EXAMPLE))
    assert report["bdd package"]["variables"] == 4


def test_run_cnf_without_count(tmp_path):
    path = tmp_path / "doc.cnf"
    path.write_text(DOC_EXAMPLE)
    out = io.StringIO()
    assert run_cnf(["-f", str(path)], out) == 0
    assert "satcount" not in json.loads(out.getvalue())["benchmark"]


def test_run_cnf_failures(tmp_path):
    assert run_cnf([], io.StringIO()) == -1
    empty = tmp_path / "empty.cnf"
    empty.write_text("p cnf 1 2\n0\n1 0\n")
    assert run_cnf(["-f", str(empty)], io.StringIO()) == -1
    bad = tmp_path / "bad.cnf"
    bad.write_text("p cnf 1 1\n5 0\n")
    assert run_cnf(["-f", str(bad)], io.StringIO()) == -1


def test_run_cnf_help():
    out = io.StringIO()
    assert run_cnf(["-h"], out) == -1
    assert out.getvalue().startswith("CNF Benchmark")