import pytest

from bddbench.bdd import BddManager


@pytest.fixture
def mgr():
    return BddManager(4)


def test_contradiction_and_tautology(mgr):
    x = mgr.ithvar(0)
    assert (x & ~x) == mgr.bot()
    assert (x | ~x) == mgr.top()


def test_de_morgan_is_canonical(mgr):
    a, b = mgr.ithvar(0), mgr.ithvar(2)
    assert ~(a & b) == (~a | ~b)


def test_nithvar_is_negation(mgr):
    assert mgr.nithvar(1) == ~mgr.ithvar(1)


def test_nodecount_counts_terminals(mgr):
    assert mgr.nodecount(mgr.top()) == 1
    assert mgr.nodecount(mgr.ithvar(3)) == 3


def test_satcount_complement_sums_to_top(mgr):
    f = (mgr.ithvar(0) & mgr.ithvar(1)) | mgr.ithvar(3)
    assert mgr.satcount(f) + mgr.satcount(~f) == mgr.satcount(mgr.top())


def test_satcount_single_variable_halves(mgr):
    assert 2 * mgr.satcount(mgr.ithvar(2)) == mgr.satcount(mgr.top())


def test_satcount_restricted_domain(mgr):
    assert mgr.satcount(mgr.ithvar(0), 1) == 1


def test_satcount_too_many_variables(mgr):
    with pytest.raises(ValueError):
        mgr.satcount(mgr.top(), 5)


def test_ithvar_out_of_range(mgr):
    with pytest.raises(IndexError):
        mgr.ithvar(4)


def test_exists_and_forall(mgr):
    x0, x1 = mgr.ithvar(0), mgr.ithvar(1)
    assert mgr.exists(x0 & x1, 0) == x1
    assert mgr.forall(x0 | x1, 0) == x1
    assert mgr.exists(x0 & x1, lambda i: i < 2) == mgr.top()
    assert mgr.forall(x0 & x1, [1]) == mgr.bot()


def test_cube_forms_agree(mgr):
    expected = mgr.ithvar(0) & mgr.ithvar(2)
    assert mgr.cube([0, 2]) == expected
    assert mgr.cube(lambda i: i % 2 == 0) == expected


def test_derived_operators(mgr):
    f, g = mgr.ithvar(0), mgr.ithvar(1) | mgr.ithvar(3)
    assert mgr.apply_diff(f, g) == (f & ~g)
    assert mgr.apply_imp(f, g) == (~f | g)
    assert mgr.apply_xnor(f, g) == ~(f ^ g)
    assert mgr.ite(f, g, mgr.ithvar(2)) == ((f & g) | (~f & mgr.ithvar(2)))


def test_relnext_and_relprev(mgr):
    # Transition: next x0 is the negation of x0, x2 is kept.
    rel = mgr.apply_xnor(mgr.ithvar(1), mgr.nithvar(0)) & mgr.apply_xnor(
        mgr.ithvar(3), mgr.ithvar(2)
    )
    states = mgr.ithvar(0) & mgr.nithvar(2)
    succ = mgr.relnext(states, rel, mgr.top())
    assert succ == (mgr.nithvar(0) & mgr.nithvar(2))
    assert mgr.relprev(succ, rel, mgr.top()) == states


def test_satone_implies_function(mgr):
    f = (mgr.ithvar(1) & mgr.nithvar(3)) | mgr.ithvar(2)
    cube = mgr.satone(f)
    assert mgr.apply_imp(cube, f) == mgr.top()
    assert mgr.satcount(cube) > 0
    assert mgr.satone(mgr.bot()) == mgr.bot()


def test_pickcube(mgr):
    f = mgr.ithvar(0) & mgr.nithvar(1)
    assert mgr.pickcube(f) == [(0, "1"), (1, "0")]


def test_builder(mgr):
    t = mgr.build_node(True)
    f = mgr.build_node(False)
    n = mgr.build_node(3, f, t)
    root = mgr.build_node(1, n, t)
    assert mgr.build() == root
    assert root == (mgr.ithvar(1) | mgr.ithvar(3))
    assert mgr.build() == mgr.bot()


def test_builder_only_terminal(mgr):
    mgr.build_node(True)
    assert mgr.build() == mgr.top()


def test_build_node_bad_arity(mgr):
    with pytest.raises(TypeError):
        mgr.build_node(1, mgr.top())


def test_hash_consistent(mgr):
    a = mgr.ithvar(0) & mgr.ithvar(1)
    b = mgr.ithvar(1) & mgr.ithvar(0)
    assert len({a, b}) == 1


def test_allocated_nodes_cover_bdd(mgr):
    f = mgr.ithvar(0) ^ mgr.ithvar(1) ^ mgr.ithvar(2)
    assert mgr.allocated_nodes() >= mgr.nodecount(f)


def test_foreign_manager_rejected(mgr):
    other = BddManager(4)
    with pytest.raises(ValueError):
        mgr.apply_and(mgr.top(), other.top())