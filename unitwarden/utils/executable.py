"""Helper for locating the unitwarden executable."""

import logging
import shutil
import sys
from pathlib import Path

from .constants import APP_NAME

logger = logging.getLogger(__name__)


def current_executable() -> str:
    """Find the absolute path of the running unitwarden program.

    systemd needs an absolute path in ExecXxx= directives, so the
    rewritten start commands cannot rely on PATH lookup.

    Returns:
        Absolute path of the executable

    Raises:
        FileNotFoundError: If no executable can be located
    """
    # Check the program we were launched as first
    argv0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
    if argv0 is not None and argv0.name == APP_NAME and argv0.is_file():
        return str(argv0.resolve())

    # Fall back to the installed console script
    installed = shutil.which(APP_NAME)
    if installed:
        return str(Path(installed).resolve())

    raise FileNotFoundError(f"Unable to locate the {APP_NAME} executable")
