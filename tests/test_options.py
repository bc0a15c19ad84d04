import pytest

from unitwarden.errors import OptionParseError
from unitwarden.models.options import HardeningOptions, OptionWithValue


def test_option_parsing_splits_on_first_equal_sign():
    opt = OptionWithValue.from_string("Environment=FOO=bar")
    assert opt.name == "Environment"
    assert opt.value == "FOO=bar"
    assert str(opt) == "Environment=FOO=bar"


def test_option_with_empty_value():
    assert OptionWithValue.from_string("ReadWritePaths=") == OptionWithValue("ReadWritePaths", "")


@pytest.mark.parametrize("line", ["ProtectHome", "=true", ""])
def test_invalid_option_lines(line):
    with pytest.raises(OptionParseError):
        OptionWithValue.from_string(line)


def test_default_cmdline():
    assert HardeningOptions().to_cmdline() == "-m generic"


def test_full_cmdline():
    opts = HardeningOptions(
        mode="aggressive",
        network_firewalling=True,
        filesystem_whitelisting=True,
        merge_paths_threshold=8,
    )
    assert opts.to_cmdline() == "-m aggressive -n -f --merge-paths-threshold 8"


def test_invalid_mode():
    with pytest.raises(ValueError):
        HardeningOptions(mode="paranoid")


def test_invalid_merge_paths_threshold():
    with pytest.raises(ValueError):
        HardeningOptions(merge_paths_threshold=0)
