import pytest

from unitwarden.core.config_manager import ConfigManager
from unitwarden.models.options import HardeningOptions


def test_missing_file_uses_defaults(tmp_path):
    config = ConfigManager(tmp_path / "missing.yaml")
    assert config.load_config() is False
    assert config.get_setting("systemctl_command") == "systemctl"
    assert config.get_setting("tracer_executable") is None
    assert config.get_hardening_options() == HardeningOptions()


def test_env_var_selects_config_file(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    monkeypatch.setenv("UNITWARDEN_CONFIG", str(config_file))
    assert ConfigManager().config_file == config_file


def test_load_config(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "version: '1.0'\n"
        "journalctl_command: /usr/local/bin/journalctl\n"
        "log_level: DEBUG\n"
        "hardening:\n"
        "  mode: aggressive\n"
        "  network_firewalling: true\n"
    )
    config = ConfigManager(config_file)

    assert config.load_config() is True
    assert config.get_setting("journalctl_command") == "/usr/local/bin/journalctl"
    assert config.get_setting("systemctl_command") == "systemctl"
    assert config.get_setting("log_level") == "DEBUG"
    assert config.get_hardening_options() == HardeningOptions(mode="aggressive", network_firewalling=True)


def test_empty_file_uses_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")
    config = ConfigManager(config_file)
    assert config.load_config() is False
    assert config.get_setting("log_level") == "INFO"


def test_invalid_yaml_uses_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("hardening: [unclosed\n")
    config = ConfigManager(config_file)
    assert config.load_config() is False
    assert config.get_hardening_options() == HardeningOptions()


def test_invalid_structure_uses_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("hardening: generic\n")
    config = ConfigManager(config_file)
    assert config.load_config() is False
    assert config.get_setting("hardening")["mode"] == "generic"


def test_invalid_mode_uses_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("hardening:\n  mode: paranoid\n")
    config = ConfigManager(config_file)
    assert config.load_config() is False
    assert config.get_hardening_options().mode == "generic"


def test_defaults_are_not_shared_between_instances(tmp_path):
    first = ConfigManager(tmp_path / "missing.yaml")
    first.settings["hardening"]["mode"] = "aggressive"
    second = ConfigManager(tmp_path / "missing.yaml")
    assert second.get_setting("hardening")["mode"] == "generic"


def test_config_without_version_loads(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("log_level: WARNING\n")
    config = ConfigManager(config_file)
    assert config.load_config() is True
    assert config.get_setting("log_level") == "WARNING"


@pytest.mark.parametrize("hardening", [
    "  merge_paths_threshold: '5'\n",
    "  merge_paths_threshold: true\n",
    "  merge_paths_threshold: 0\n",
    "  network_firewalling: 'no'\n",
    "  filesystem_whitelisting: 1\n",
])
def test_mistyped_hardening_values_use_defaults(tmp_path, hardening):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("hardening:\n" + hardening)
    config = ConfigManager(config_file)
    assert config.load_config() is False
    assert config.get_hardening_options() == HardeningOptions()


def test_threshold_and_flags_are_loaded(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "hardening:\n"
        "  network_firewalling: false\n"
        "  filesystem_whitelisting: true\n"
        "  merge_paths_threshold: 5\n"
    )
    config = ConfigManager(config_file)
    assert config.load_config() is True
    assert config.get_hardening_options() == HardeningOptions(
        filesystem_whitelisting=True, merge_paths_threshold=5
    )
