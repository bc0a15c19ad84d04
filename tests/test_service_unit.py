from pathlib import Path

from unitwarden.models.service import FragmentKind, ServiceUnit


def test_plain_unit():
    unit = ServiceUnit.from_string("nginx")
    assert unit.name == "nginx"
    assert unit.arg is None
    assert unit.unit_name() == "nginx.service"


def test_template_instance_splits_on_first_at():
    unit = ServiceUnit.from_string("openvpn@client@home")
    assert unit.name == "openvpn"
    assert unit.arg == "client@home"
    assert unit.unit_name() == "openvpn@client@home.service"


def test_service_suffix_is_dropped():
    assert ServiceUnit.from_string("getty@tty1.service") == ServiceUnit("getty", "tty1")
    assert ServiceUnit.from_string("nginx.service") == ServiceUnit("nginx")


def test_fragment_paths():
    unit = ServiceUnit.from_string("nginx")
    assert unit.fragment_path(FragmentKind.PROFILING) == Path(
        "/run/systemd/system/nginx.service.d/zz_unitwarden-profiling.conf"
    )
    assert unit.fragment_path(FragmentKind.HARDENING) == Path(
        "/etc/systemd/system/nginx.service.d/zz_unitwarden-hardening.conf"
    )


def test_template_fragment_dir_is_shared_by_instances(tmp_path):
    unit = ServiceUnit.from_string("getty@tty1")
    assert unit.fragment_dir(tmp_path) == tmp_path / "getty@.service.d"
    assert unit.fragment_path(FragmentKind.HARDENING, tmp_path) == (
        tmp_path / "getty@.service.d" / "zz_unitwarden-hardening.conf"
    )
