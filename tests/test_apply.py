import io

import pytest

from bddbench.apply import ApplyPolicy, Operand, combine, main, run_apply
from bddbench.bdd import BddManager
from bddbench.cli import InputError, parse_input

TERMINAL = 0xFFFF


def encode(level, low, high):
    return level.to_bytes(2, "little") + low.to_bytes(4, "little") + high.to_bytes(4, "little")


def write_var(path, level):
    path.write_bytes(
        encode(TERMINAL, 0, 0) + encode(TERMINAL, 1, 1) + encode(level, 0, 1)
    )
    return str(path)


@pytest.fixture
def two_files(tmp_path):
    return write_var(tmp_path / "a.bdd", 0), write_var(tmp_path / "b.bdd", 3)


@pytest.mark.parametrize(
    "text, expected",
    [("and", Operand.AND), ("A", Operand.AND), ("OR", Operand.OR), ("o", Operand.OR)],
)
def test_operand_parse(text, expected):
    assert Operand.parse(text) is expected


def test_operand_parse_invalid():
    with pytest.raises(InputError) as info:
        Operand.parse("xor")
    assert info.value.messages == ["Undefined operand: xor"]


def test_combine_and_or():
    mgr = BddManager(2)
    x, y = mgr.ithvar(0), mgr.ithvar(1)
    assert combine([x, y], Operand.AND) == mgr.apply_and(x, y)
    assert combine([x, y], Operand.OR) == mgr.apply_or(x, y)


def test_combine_empty():
    with pytest.raises(ValueError):
        combine([], Operand.AND)


def test_policy_missing_file(tmp_path):
    policy = ApplyPolicy()
    with pytest.raises(InputError):
        policy.handle("f", str(tmp_path / "missing.bdd"))
    assert policy.inputs == []


def test_policy_through_parse_input(two_files):
    policy = ApplyPolicy()
    parse_input(["-f", two_files[0], "-f", two_files[1], "-o", "or"], policy)
    assert policy.inputs == list(two_files)
    assert policy.operand is Operand.OR


def test_run_apply_and(two_files):
    buf = io.StringIO()
    code = run_apply(["-f", two_files[0], "-f", two_files[1]], buf)
    text = buf.getvalue()
    assert code == 0
    assert '"operand": "and"' in text
    assert '"operations": 1' in text
    assert '"name": "apply"' in text
    assert '"satcount": 1,' in text


def test_run_apply_or(two_files):
    buf = io.StringIO()
    code = run_apply(["-f", two_files[0], "-f", two_files[1], "-o", "or"], buf)
    text = buf.getvalue()
    assert code == 0
    assert '"operand": "or"' in text
    assert '"satcount": 3,' in text


def test_run_apply_needs_two_files(two_files, capsys):
    assert run_apply(["-f", two_files[0]], io.StringIO()) == -1
    assert "Not enough files" in capsys.readouterr().err


def test_run_apply_help():
    buf = io.StringIO()
    assert run_apply(["-h"], buf) == -1
    assert buf.getvalue().startswith("Apply Benchmark\n")


def test_main_bad_operand(two_files, capsys):
    assert main(["-f", two_files[0], "-f", two_files[1], "-o", "nand"]) == -1
    assert "Undefined operand: nand" in capsys.readouterr().err