"""Read the tracer's profiling result back from the systemd journal."""

import itertools
import logging
import os
import subprocess
from typing import Callable, Iterable, Iterator, List

from ..errors import SnippetNotFoundError
from ..models.options import OptionWithValue
from ..models.service import ServiceUnit
from ..utils.constants import END_OPTION_OUTPUT_SNIPPET, START_OPTION_OUTPUT_SNIPPET

logger = logging.getLogger(__name__)


def _take_while_inclusive(predicate: Callable[[str], bool], lines: Iterable[str]) -> Iterator[str]:
    """Like itertools.takewhile, but also yields the first failing line."""
    for line in lines:
        yield line
        if not predicate(line):
            break


def extract_snippet(lines: Iterable[str]) -> List[str]:
    """Extract the option lines from a reverse chronological journal stream.

    With 'journalctl -r' the end marker is read first, so lines are skipped
    until it shows up, then kept until the start marker. Nothing past the
    start marker is consumed.

    Args:
        lines: Journal messages, most recent first, without line terminators

    Returns:
        Option lines, in chronological order, markers removed

    Raises:
        SnippetNotFoundError: If the markers are missing
    """
    snippet_lines = list(_take_while_inclusive(
        lambda l: l != START_OPTION_OUTPUT_SNIPPET,
        itertools.dropwhile(lambda l: l != END_OPTION_OUTPUT_SNIPPET, lines),
    ))
    if len(snippet_lines) < 2 or snippet_lines[-1] != START_OPTION_OUTPUT_SNIPPET:
        raise SnippetNotFoundError("Unable to get profiling result snippet")

    # Remove marker lines and restore chronological order
    return snippet_lines[-2:0:-1]


class ProfilingResultReader:
    """Scrapes the profiling result of a unit's last run from journalctl."""

    def __init__(
        self,
        journalctl_command: str = "journalctl",
        parser: Callable[[str], OptionWithValue] = OptionWithValue.from_string,
    ):
        """Initialize the reader.

        Args:
            journalctl_command: journalctl executable to invoke
            parser: Parses one option line
        """
        self.journalctl_command = journalctl_command
        self.parser = parser

    def read(self, unit: ServiceUnit) -> List[OptionWithValue]:
        """Get the options the tracer logged during the unit's last run.

        Args:
            unit: Service unit

        Returns:
            Parsed options, in the order they were logged

        Raises:
            SnippetNotFoundError: If no complete result is in the journal
        """
        cmd = [
            self.journalctl_command,
            "-r",
            "-o", "cat",
            "--output-fields=MESSAGE",
            "--no-tail",
            "-u", unit.unit_name(),
        ]
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace",
            env={**os.environ, "LANG": "C"},
        )
        try:
            lines = (line.rstrip("\n") for line in proc.stdout)
            option_lines = extract_snippet(lines)
        finally:
            # Stop journalctl, it may still have a lot of output for us
            proc.terminate()
            proc.wait()
            proc.stdout.close()

        opts = [self.parser(line) for line in option_lines]
        logger.debug(f"Read {len(opts)} option(s) from the journal of {unit}")
        return opts
