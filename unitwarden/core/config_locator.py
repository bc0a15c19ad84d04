"""Locate the config files systemd applies to a unit."""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional

from ..errors import MalformedStatusError
from ..models.service import ServiceUnit

logger = logging.getLogger(__name__)

# Box drawing characters systemctl uses to render the drop-in tree
_TREE_CHARS = "└├─│ "


def parse_status_output(text: str) -> List[Path]:
    """Extract unit config file paths from 'systemctl status' output.

    The main unit file comes from the 'Loaded:' line, drop-ins from the
    'Drop-In:' block that follows it, e.g.:

         Loaded: loaded (/usr/lib/systemd/system/foo.service; enabled; preset: enabled)
        Drop-In: /usr/lib/systemd/system/service.d
                 └─10-timeout-abort.conf
                 /etc/systemd/system/foo.service.d
                 └─override.conf, zz.conf
         Active: inactive (dead)

    Args:
        text: systemctl status output, in the C locale

    Returns:
        Paths in the order systemd applies them, main unit file first

    Raises:
        MalformedStatusError: If the output does not have the expected layout
    """
    paths: List[Path] = []
    drop_in_dir: Optional[Path] = None

    for raw_line in text.splitlines():
        line = raw_line.lstrip()

        if line.startswith("Loaded:"):
            # Main unit file
            if paths:
                raise MalformedStatusError(f"Unexpected 'Loaded:' line: {raw_line!r}")
            _, sep, rest = line.partition("(")
            path, sep2, _ = rest.partition(";")
            if not sep or not sep2:
                raise MalformedStatusError(f"Failed to locate main unit file in {raw_line!r}")
            paths.append(Path(path))

        elif line.startswith("Drop-In:"):
            # Drop-in base dir
            if len(paths) != 1 or drop_in_dir is not None:
                raise MalformedStatusError(f"Unexpected 'Drop-In:' line: {raw_line!r}")
            drop_in_dir = Path(line.partition(":")[2].strip())

        elif drop_in_dir is not None:
            if ":" in line:
                # Not a path, next 'key: value' line
                break
            elif line.startswith("/"):
                # New base dir
                drop_in_dir = Path(line.strip())
            else:
                for filename in line.strip().lstrip(_TREE_CHARS).split(","):
                    filename = filename.strip()
                    if filename:
                        paths.append(drop_in_dir / filename)

    if not paths:
        raise MalformedStatusError("No 'Loaded:' line found in systemctl status output")

    return paths


class ConfigFileLocator:
    """Asks systemd which config files make up a unit."""

    def __init__(self, systemctl_command: str = "systemctl"):
        """Initialize the locator.

        Args:
            systemctl_command: systemctl executable to invoke
        """
        self.systemctl_command = systemctl_command

    def locate(self, unit: ServiceUnit) -> List[Path]:
        """Get the config file paths for a unit.

        Args:
            unit: Service unit

        Returns:
            Paths in the order systemd applies them, main unit file first
        """
        # systemctl status exits with 3 for inactive units, so the status is not checked
        result = subprocess.run(
            [self.systemctl_command, "status", "-n", "0", unit.unit_name()],
            capture_output=True,
            text=True,
            env={**os.environ, "LANG": "C"},
        )
        logger.debug(f"systemctl status for {unit} exited with {result.returncode}")
        return parse_status_output(result.stdout)
