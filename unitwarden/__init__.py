"""unitwarden - Automatic systemd service hardening guided by profiling."""

from .utils.constants import APP_VERSION

__version__ = APP_VERSION
