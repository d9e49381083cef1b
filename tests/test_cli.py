import pytest

from bddbench.cli import (
    CommonOptions,
    HelpRequested,
    InputError,
    ParsingPolicy,
    ascii_ltrim,
    ascii_rtrim,
    ascii_tolower,
    ascii_trim,
    is_prefix,
    parse_input,
    usage,
)


class _Recorder(ParsingPolicy):
    name = "Recorder"
    args = "f:c"
    help_text = "        -f PATH               Some file"

    def __init__(self):
        self.seen = []

    def handle(self, flag, arg):
        if flag == "f" and arg == "missing":
            raise InputError("File 'missing' does not exist")
        self.seen.append((flag, arg))


def test_defaults_without_arguments():
    assert parse_input([], _Recorder()) == CommonOptions()
    opts = CommonOptions()
    assert opts.memory_mib == 128
    assert opts.threads == 1
    assert opts.enable_reordering is False
    assert opts.temp_path == ""


def test_common_options_are_parsed():
    opts = parse_input(["-M", "256", "-P", "4", "-R", "-T", "/var/tmp"], _Recorder())
    assert opts == CommonOptions(
        memory_mib=256, threads=4, enable_reordering=True, temp_path="/var/tmp"
    )


def test_policy_receives_its_flags_in_order():
    policy = _Recorder()
    parse_input(["-f", "a.cnf", "-c", "-f", "b.cnf"], policy)
    assert policy.seen == [("f", "a.cnf"), ("c", None), ("f", "b.cnf")]


def test_non_positive_memory_is_rejected():
    with pytest.raises(InputError) as info:
        parse_input(["-M", "0"], _Recorder())
    assert info.value.messages == ["  Must specify positive amount of memory (-M)"]


def test_non_positive_threads_is_rejected():
    with pytest.raises(InputError) as info:
        parse_input(["-P", "-2"], _Recorder())
    assert "  Must specify a positive thread count (-P)" in info.value.messages


def test_invalid_number_is_reported():
    with pytest.raises(InputError) as info:
        parse_input(["-M", "lots"], _Recorder())
    assert info.value.messages[0].startswith("Invalid number")


def test_number_out_of_range_is_reported():
    with pytest.raises(InputError) as info:
        parse_input(["-M", "99999999999999"], _Recorder())
    assert info.value.messages[0].startswith("Number out of range")


def test_number_with_trailing_text_uses_prefix():
    opts = parse_input(["-M", "64MiB"], _Recorder())
    assert opts.memory_mib == 64


def test_errors_are_collected():
    with pytest.raises(InputError) as info:
        parse_input(["-f", "missing", "-M", "0"], _Recorder())
    assert len(info.value.messages) == 2
    assert "File 'missing' does not exist" in info.value.messages


def test_help_flag_raises_help():
    policy = _Recorder()
    with pytest.raises(HelpRequested) as info:
        parse_input(["-h"], policy)
    assert info.value.text == usage(policy)


def test_unknown_flag_raises_help():
    with pytest.raises(HelpRequested):
        parse_input(["-x"], _Recorder())


def test_missing_argument_raises_help():
    with pytest.raises(HelpRequested):
        parse_input(["-M"], _Recorder())


def test_usage_mentions_policy_and_options():
    text = usage(_Recorder())
    assert text.startswith("Recorder Benchmark\n")
    assert "        -M MiB       [128]    Amount of memory (MiB)\n" in text
    assert text.endswith(_Recorder.help_text + "\n")


def test_ascii_tolower_only_touches_ascii_letters():
    assert ascii_tolower("Mirror-Quad") == "mirror-quad"
    assert ascii_tolower("ÄB1") == "Äb1"


def test_trims():
    assert ascii_ltrim("  \tx y ") == "x y "
    assert ascii_rtrim(" x y \n") == " x y"
    assert ascii_trim("\v x \f") == "x"


def test_is_prefix():
    assert is_prefix("mir", "mirror")
    assert is_prefix("", "anything")
    assert not is_prefix("mirrors", "mirror")
    assert not is_prefix("rot", "mirror")