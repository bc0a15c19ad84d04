"""Data models for hardening options."""

from dataclasses import dataclass
from typing import Optional

from ..errors import OptionParseError
from ..utils.constants import DEFAULT_HARDENING_MODE, HARDENING_MODES


@dataclass(frozen=True)
class OptionWithValue:
    """A single systemd directive and its value, e.g. ProtectHome=true.

    Attributes:
        name: Directive name
        value: Directive value, rendered verbatim
    """

    name: str
    value: str

    @classmethod
    def from_string(cls, line: str) -> 'OptionWithValue':
        """Parse a 'Name=value' line.

        Args:
            line: Option line as printed by the tracer

        Returns:
            OptionWithValue instance

        Raises:
            OptionParseError: If the line is not a directive assignment
        """
        name, sep, value = line.partition("=")
        name = name.strip()
        if not sep or not name:
            raise OptionParseError(f"Invalid option line: {line!r}")
        return cls(name=name, value=value.strip())

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


@dataclass
class HardeningOptions:
    """Settings passed through to the tracer on its command line.

    Attributes:
        mode: Hardening mode ('generic' or 'aggressive')
        network_firewalling: Enable IP address firewalling
        filesystem_whitelisting: Enable filesystem path whitelisting
        merge_paths_threshold: Path count above which paths are merged into their parent
    """

    mode: str = DEFAULT_HARDENING_MODE
    network_firewalling: bool = False
    filesystem_whitelisting: bool = False
    merge_paths_threshold: Optional[int] = None

    def __post_init__(self):
        """Validate options after initialization."""
        if self.mode not in HARDENING_MODES:
            raise ValueError(f"Invalid mode: {self.mode}. Must be one of {', '.join(HARDENING_MODES)}")

        if self.merge_paths_threshold is not None and self.merge_paths_threshold < 1:
            raise ValueError("merge_paths_threshold must be a positive integer")

    def to_cmdline(self) -> str:
        """Serialize to tracer command line flags.

        Returns:
            Flag string, e.g. '-m generic -n'
        """
        args = ["-m", self.mode]
        if self.network_firewalling:
            args.append("-n")
        if self.filesystem_whitelisting:
            args.append("-f")
        if self.merge_paths_threshold is not None:
            args.extend(["--merge-paths-threshold", str(self.merge_paths_threshold)])
        return " ".join(args)

    @classmethod
    def from_dict(cls, data: dict) -> 'HardeningOptions':
        """Create HardeningOptions from a config dictionary.

        Args:
            data: Dictionary with hardening settings

        Returns:
            HardeningOptions instance
        """
        return cls(
            mode=data.get("mode", DEFAULT_HARDENING_MODE),
            network_firewalling=bool(data.get("network_firewalling", False)),
            filesystem_whitelisting=bool(data.get("filesystem_whitelisting", False)),
            merge_paths_threshold=data.get("merge_paths_threshold"),
        )
