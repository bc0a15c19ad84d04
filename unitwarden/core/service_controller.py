"""Service controller for interacting with systemd via systemctl."""

import logging
import subprocess
from typing import List

from ..errors import SystemctlError
from ..models.service import ServiceUnit

logger = logging.getLogger(__name__)


class ServiceController:
    """Applies config changes and lifecycle actions to a unit via systemctl."""

    def __init__(self, unit: ServiceUnit, systemctl_command: str = "systemctl"):
        """Initialize the controller.

        Args:
            unit: Service unit to act on
            systemctl_command: systemctl executable to invoke
        """
        self.unit = unit
        self.systemctl_command = systemctl_command

    def reload(self):
        """Make systemd reread all unit files.

        Raises:
            SystemctlError: If systemctl exits with a failure status
        """
        logger.info("Reloading systemd unit configuration")
        self._execute_systemctl("daemon-reload", ["daemon-reload"])

    def action(self, verb: str, block: bool = True):
        """Run a lifecycle action (start, stop, restart, ...) on the unit.

        Args:
            verb: systemctl verb
            block: Wait for the job to complete

        Raises:
            SystemctlError: If systemctl exits with a failure status
        """
        unit_name = self.unit.unit_name()
        logger.info(f"{verb} {unit_name}")

        args = [verb]
        if not block:
            args.append("--no-block")
        args.append(unit_name)
        self._execute_systemctl(verb, args)

    def _execute_systemctl(self, verb: str, args: List[str]):
        """Execute systemctl, leaving its output on our terminal.

        Args:
            verb: systemctl verb, for error reporting
            args: systemctl arguments
        """
        result = subprocess.run([self.systemctl_command, *args])
        if result.returncode != 0:
            logger.error(f"systemctl {verb} failed with exit status {result.returncode}")
            raise SystemctlError(verb, result.returncode)
        logger.debug(f"systemctl {verb} succeeded")
