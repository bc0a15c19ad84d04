"""Data models for systemd service units."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ..utils.constants import APP_NAME, FRAGMENT_PREFIX, PERSISTENT_UNIT_DIR, TRANSIENT_UNIT_DIR


class FragmentKind(Enum):
    """Kinds of drop-in fragments owned by unitwarden."""

    PROFILING = "profiling"
    HARDENING = "hardening"

    @property
    def persistent(self) -> bool:
        """Whether the fragment survives a reboot (/etc) or not (/run)."""
        return self is FragmentKind.HARDENING

    @property
    def default_base_dir(self) -> Path:
        return PERSISTENT_UNIT_DIR if self.persistent else TRANSIENT_UNIT_DIR

    @property
    def filename(self) -> str:
        return f"{FRAGMENT_PREFIX}{APP_NAME}-{self.value}.conf"


@dataclass(frozen=True)
class ServiceUnit:
    """Identity of a systemd service, plain or template instance.

    Attributes:
        name: Unit base name (e.g., 'nginx', 'getty')
        arg: Template instance argument (e.g., 'tty1'), None for plain units
    """

    name: str
    arg: Optional[str] = None

    @classmethod
    def from_string(cls, unit: str) -> 'ServiceUnit':
        """Create a ServiceUnit from a unit token.

        Args:
            unit: Unit token, e.g. 'nginx', 'getty@tty1' or 'nginx.service'

        Returns:
            ServiceUnit instance
        """
        if unit.endswith(".service"):
            unit = unit[:-len(".service")]
        name, sep, arg = unit.partition("@")
        return cls(name=name, arg=arg if sep else None)

    def unit_name(self) -> str:
        """Get the full unit name, e.g. 'getty@tty1.service'."""
        if self.arg is not None:
            return f"{self.name}@{self.arg}.service"
        return f"{self.name}.service"

    def fragment_dir(self, base_dir: Path) -> Path:
        """Get the drop-in directory for this unit.

        Template instances share the template's directory, so a fragment
        applies to every instance.

        Args:
            base_dir: systemd unit search path (/etc/systemd/system or /run/systemd/system)

        Returns:
            Drop-in directory path
        """
        template_marker = "@" if self.arg is not None else ""
        return base_dir / f"{self.name}{template_marker}.service.d"

    def fragment_path(self, kind: FragmentKind, base_dir: Optional[Path] = None) -> Path:
        """Get the path of one of our drop-in fragments.

        Args:
            kind: Fragment kind
            base_dir: Override for the unit search path, defaults to the kind's own

        Returns:
            Fragment file path
        """
        if base_dir is None:
            base_dir = kind.default_base_dir
        return self.fragment_dir(base_dir) / kind.filename

    def __str__(self) -> str:
        return self.unit_name()
