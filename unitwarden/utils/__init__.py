"""Utility functions and constants."""

from .constants import *
from .executable import current_executable

__all__ = [
    "APP_NAME",
    "CONFIG_FILE",
    "END_OPTION_OUTPUT_SNIPPET",
    "START_OPTION_OUTPUT_SNIPPET",
    "current_executable",
]
