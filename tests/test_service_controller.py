from unittest import mock

import pytest

from unitwarden.core.service_controller import ServiceController
from unitwarden.errors import SystemctlError
from unitwarden.models.service import ServiceUnit

RUN = "unitwarden.core.service_controller.subprocess.run"


@pytest.fixture
def controller():
    return ServiceController(ServiceUnit("getty", "tty1"))


def test_action_non_blocking(controller):
    with mock.patch(RUN, return_value=mock.Mock(returncode=0)) as run:
        controller.action("restart", block=False)
    run.assert_called_once_with(["systemctl", "restart", "--no-block", "getty@tty1.service"])


def test_action_blocking(controller):
    with mock.patch(RUN, return_value=mock.Mock(returncode=0)) as run:
        controller.action("stop", block=True)
    run.assert_called_once_with(["systemctl", "stop", "getty@tty1.service"])


def test_action_failure_carries_verb_and_status(controller):
    with mock.patch(RUN, return_value=mock.Mock(returncode=5)):
        with pytest.raises(SystemctlError) as excinfo:
            controller.action("start")
    assert excinfo.value.verb == "start"
    assert excinfo.value.returncode == 5


def test_stderr_output_alone_is_not_a_failure(controller):
    result = mock.Mock(returncode=0, stderr="Warning: unit file changed on disk")
    with mock.patch(RUN, return_value=result):
        controller.action("try-restart", block=False)


def test_reload(controller):
    with mock.patch(RUN, return_value=mock.Mock(returncode=0)) as run:
        controller.reload()
    run.assert_called_once_with(["systemctl", "daemon-reload"])


def test_reload_failure(controller):
    with mock.patch(RUN, return_value=mock.Mock(returncode=1)):
        with pytest.raises(SystemctlError) as excinfo:
            controller.reload()
    assert excinfo.value.verb == "daemon-reload"
