"""Tracer modes invoked by the commands of a profiling fragment.

'run' records one wrapped start command and runs it, 'merge-profile-data'
combines the records once the unit stopped and writes the resulting options
to stdout (hence the journal) between the snippet markers.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, TextIO, Tuple

import yaml

from ..models.options import HardeningOptions, OptionWithValue
from ..utils.constants import END_OPTION_OUTPUT_SNIPPET, EXEC_PREFIX_CHARS, START_OPTION_OUTPUT_SNIPPET

logger = logging.getLogger(__name__)

# Derives hardening options from the recorded profiles
ProfilePolicy = Callable[[List[Dict], HardeningOptions], List[OptionWithValue]]


def no_options(profiles: List[Dict], hardening_opts: HardeningOptions) -> List[OptionWithValue]:
    return []


def split_exec_prefix(cmd: Sequence[str]) -> Tuple[str, List[str]]:
    """Separate systemd special prefix characters from a command.

    Args:
        cmd: Command as passed by systemd, e.g. ['-/usr/bin/foo', '--serve']

    Returns:
        Tuple of (prefix characters, command without them)
    """
    first = cmd[0]
    stripped = first.lstrip(EXEC_PREFIX_CHARS)
    prefix = first[:len(first) - len(stripped)]
    rest = list(cmd[1:])
    return prefix, ([stripped] + rest) if stripped else rest


def run_command(cmd: Sequence[str], profile_data_path: Path, hardening_opts: HardeningOptions) -> int:
    """Record a start command and run it.

    Args:
        cmd: Original command, with its systemd prefix characters
        profile_data_path: File receiving the profile record
        hardening_opts: Options the profile was requested with

    Returns:
        Exit code of the command, 0 if systemd was told to ignore failures
    """
    profile_data_path = Path(profile_data_path)
    profile_data_path.parent.mkdir(parents=True, exist_ok=True)
    record = {
        "command": list(cmd),
        "hardening": hardening_opts.to_cmdline(),
    }
    with open(profile_data_path, 'w') as f:
        yaml.safe_dump(record, f, default_flow_style=False, sort_keys=False)
    logger.debug(f"Profile record written in {profile_data_path}")

    prefix, argv = split_exec_prefix(cmd)
    executable = None
    if "@" in prefix:
        # First word is the executable, second one its argv[0]
        executable, argv = argv[0], argv[1:]

    result = subprocess.run(argv, executable=executable)
    if result.returncode != 0:
        logger.warning(f"{argv[0]} exited with status {result.returncode}")
    if "-" in prefix:
        return 0
    return result.returncode


def merge_profile_data(
    paths: Sequence[Path],
    hardening_opts: HardeningOptions,
    policy: ProfilePolicy = no_options,
    out: Optional[TextIO] = None,
) -> List[OptionWithValue]:
    """Combine profile records and print the resulting options snippet.

    Args:
        paths: Profile record files, one per wrapped command
        hardening_opts: Options the profile was requested with
        policy: Derives hardening options from the records
        out: Output stream, defaults to stdout

    Returns:
        Resulting options
    """
    profiles = []
    for path in paths:
        try:
            with open(path, 'r') as f:
                profiles.append(yaml.safe_load(f) or {})
        except FileNotFoundError:
            # The command never ran, e.g. an earlier ExecStartPre= failed
            logger.warning(f"No profile data at {path}")

    opts = policy(profiles, hardening_opts)
    logger.info(f"Merged {len(profiles)} profile(s) into {len(opts)} option(s)")

    # Write the whole snippet at once, log lines must not end up inside it
    out = out or sys.stdout
    lines = [START_OPTION_OUTPUT_SNIPPET, *(str(opt) for opt in opts), END_OPTION_OUTPUT_SNIPPET]
    out.write("".join(f"{line}\n" for line in lines))
    out.flush()
    return opts
