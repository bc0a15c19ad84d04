from pathlib import Path
from unittest import mock

import pytest

from unitwarden.core.config_locator import ConfigFileLocator, parse_status_output
from unitwarden.errors import MalformedStatusError
from unitwarden.models.service import ServiceUnit

STATUS_WITH_DROP_INS = """\
○ mariadb.service - MariaDB 10.11.6 database server
     Loaded: loaded (/usr/lib/systemd/system/mariadb.service; enabled; preset: enabled)
    Drop-In: /usr/lib/systemd/system/service.d
             └─10-timeout-abort.conf
             /etc/systemd/system/mariadb.service.d
             └─override.conf, zz_other.conf
     Active: inactive (dead) since Fri 2024-05-31 10:02:11 CEST; 3s ago
   Duration: 1min 2.117s
       Docs: man:mariadbd(8)
"""

STATUS_WITHOUT_DROP_INS = """\
● sshd.service - OpenSSH server daemon
     Loaded: loaded (/usr/lib/systemd/system/sshd.service; enabled; preset: enabled)
     Active: active (running) since Fri 2024-05-31 09:00:00 CEST; 1h ago
"""


def test_parse_with_drop_ins():
    assert parse_status_output(STATUS_WITH_DROP_INS) == [
        Path("/usr/lib/systemd/system/mariadb.service"),
        Path("/usr/lib/systemd/system/service.d/10-timeout-abort.conf"),
        Path("/etc/systemd/system/mariadb.service.d/override.conf"),
        Path("/etc/systemd/system/mariadb.service.d/zz_other.conf"),
    ]


def test_parse_without_drop_ins():
    assert parse_status_output(STATUS_WITHOUT_DROP_INS) == [
        Path("/usr/lib/systemd/system/sshd.service"),
    ]


def test_parse_is_idempotent():
    assert parse_status_output(STATUS_WITH_DROP_INS) == parse_status_output(STATUS_WITH_DROP_INS)


def test_missing_loaded_line_is_rejected():
    with pytest.raises(MalformedStatusError):
        parse_status_output("Unit foo.service could not be found.\n")


def test_drop_in_before_loaded_is_rejected():
    text = "    Drop-In: /etc/systemd/system/foo.service.d\n             └─a.conf\n"
    with pytest.raises(MalformedStatusError):
        parse_status_output(text)


def test_second_loaded_line_is_rejected():
    text = STATUS_WITHOUT_DROP_INS + "     Loaded: loaded (/etc/systemd/system/x.service; disabled)\n"
    with pytest.raises(MalformedStatusError):
        parse_status_output(text)


def test_second_drop_in_line_is_rejected():
    text = (
        "     Loaded: loaded (/usr/lib/systemd/system/foo.service; enabled)\n"
        "    Drop-In: /usr/lib/systemd/system/service.d\n"
        "    Drop-In: /etc/systemd/system/foo.service.d\n"
    )
    with pytest.raises(MalformedStatusError):
        parse_status_output(text)


def test_loaded_line_without_path_is_rejected():
    with pytest.raises(MalformedStatusError):
        parse_status_output("     Loaded: not-found\n")


def test_locate_runs_systemctl_status_in_c_locale():
    completed = mock.Mock(returncode=3, stdout=STATUS_WITHOUT_DROP_INS)
    with mock.patch("unitwarden.core.config_locator.subprocess.run", return_value=completed) as run:
        paths = ConfigFileLocator().locate(ServiceUnit("sshd"))

    assert paths == [Path("/usr/lib/systemd/system/sshd.service")]
    cmd = run.call_args.args[0]
    assert cmd == ["systemctl", "status", "-n", "0", "sshd.service"]
    assert run.call_args.kwargs["env"]["LANG"] == "C"
