"""Core functionality for systemd unit profiling and hardening."""

from .config_locator import ConfigFileLocator, parse_status_output
from .directive_reader import read_directive_values
from .fragments import HardeningFragmentWriter, ProfilingFragmentWriter
from .service_controller import ServiceController
from .profiling_result import ProfilingResultReader, extract_snippet
from .config_manager import ConfigManager

__all__ = [
    "ConfigFileLocator",
    "parse_status_output",
    "read_directive_values",
    "HardeningFragmentWriter",
    "ProfilingFragmentWriter",
    "ServiceController",
    "ProfilingResultReader",
    "extract_snippet",
    "ConfigManager",
]
