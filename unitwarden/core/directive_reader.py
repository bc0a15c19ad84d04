"""Resolve directive values from unit config files the way systemd does."""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from ..errors import DirectiveParseError

logger = logging.getLogger(__name__)

CONTINUATION_CHAR = "\\"


def read_directive_values(key: str, config_paths: Iterable[Path]) -> List[str]:
    """Get the effective values of a directive across unit config files.

    Files are processed in order. An empty assignment ('Key=') clears every
    value set before it, including values from previous files.

    Note: 'systemctl show -p Key' could be used instead, but its output
    format differs from config files and would need interpreting anyway.

    Args:
        key: Directive name, e.g. 'ExecStart'
        config_paths: Config files, in the order systemd applies them

    Returns:
        Effective values, in order

    Raises:
        DirectiveParseError: If a directive line cannot be parsed
    """
    values: List[str] = []
    for config_path in config_paths:
        file_values = _read_file_values(key, Path(config_path))
        while "" in file_values:
            file_values = file_values[file_values.index("") + 1:]
            values.clear()
        values.extend(file_values)

    logger.debug(f"Resolved {key}= values: {values}")
    return values


def _read_file_values(key: str, config_path: Path) -> List[str]:
    """Collect the raw values of a directive in a single file."""
    prefix = f"{key}="
    file_values = []
    with open(config_path, "r") as f:
        lines = _numbered_lines(f)
        for lineno, line in lines:
            if not line.startswith(prefix):
                continue

            _, sep, val = line.partition("=")
            if not sep:
                raise DirectiveParseError("Unable to parse service option line", config_path, lineno)
            val = val.strip()

            if line.endswith(CONTINUATION_CHAR):
                # Remove trailing '\' and append next lines
                val = val[:-1]
                while True:
                    try:
                        lineno, next_line = next(lines)
                    except StopIteration:
                        raise DirectiveParseError("Unexpected end of file", config_path, lineno) from None
                    val = f"{val} {next_line.lstrip()}"
                    if next_line.endswith(CONTINUATION_CHAR):
                        val = val[:-1]
                    else:
                        break

            file_values.append(val)

    return file_values


def _numbered_lines(f) -> Iterator[Tuple[int, str]]:
    for lineno, line in enumerate(f, start=1):
        yield lineno, line.rstrip("\r\n")
