"""Application constants and configuration."""

from pathlib import Path

# Application metadata
APP_NAME = "unitwarden"
APP_VERSION = "1.0.0"

# Paths
CONFIG_FILE = Path("/etc") / APP_NAME / "config.yaml"
CONFIG_ENV_VAR = "UNITWARDEN_CONFIG"

# systemd search paths for drop-in fragments
PERSISTENT_UNIT_DIR = Path("/etc/systemd/system")
TRANSIENT_UNIT_DIR = Path("/run/systemd/system")
RUNTIME_DIR = Path("/run")

# Drop-in fragment naming, "zz_" sorts after any pre-existing fragment
FRAGMENT_PREFIX = "zz_"
GENERATED_HEADER = f"# This file has been autogenerated by {APP_NAME}"

# Command line prefix for ExecStartXxx= that bypasses all hardening options
# See https://www.freedesktop.org/software/systemd/man/255/systemd.service.html#Command%20lines
PRIVILEGED_PREFIX = "+"
EXEC_PREFIX_CHARS = "@-:+!"

# Start command directives, in the order systemd runs them
EXEC_START_DIRECTIVES = ("ExecStartPre", "ExecStart", "ExecStartPost")

# Markers bounding the options block the tracer writes to the journal
START_OPTION_OUTPUT_SNIPPET = "-------- START OPTION OUTPUT SNIPPET --------"
END_OPTION_OUTPUT_SNIPPET = "-------- END OPTION OUTPUT SNIPPET --------"

# Default settings
DEFAULT_HARDENING_MODE = "generic"
HARDENING_MODES = ("generic", "aggressive")
DEFAULT_LOG_LEVEL = "INFO"
