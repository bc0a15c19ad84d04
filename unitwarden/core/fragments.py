"""Writers for the drop-in config fragments unitwarden owns."""

import logging
import random
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..errors import FragmentConflictError, FragmentExistsError
from ..models.options import HardeningOptions, OptionWithValue
from ..models.service import FragmentKind, ServiceUnit
from ..utils.constants import (
    APP_NAME,
    EXEC_PREFIX_CHARS,
    EXEC_START_DIRECTIVES,
    GENERATED_HEADER,
    PERSISTENT_UNIT_DIR,
    PRIVILEGED_PREFIX,
    RUNTIME_DIR,
    TRANSIENT_UNIT_DIR,
)
from .config_locator import ConfigFileLocator
from .directive_reader import read_directive_values

logger = logging.getLogger(__name__)


def allocate_profile_data_dir_name() -> str:
    """Pick a fresh name for the profile data runtime directory.

    Returns:
        Directory name, e.g. 'unitwarden-profile-data_1a2b3c4d'
    """
    return f"{APP_NAME}-profile-data_{random.getrandbits(32):08x}"


def is_unconfined_command(cmd: str) -> bool:
    """Check if an ExecXxx= command runs with full privileges.

    systemd accepts several prefix characters in any order, so '+' is looked
    up in the whole leading prefix: '-+/bin/foo' is unconfined too.

    Args:
        cmd: Command line, including its special prefix characters

    Returns:
        True if the '+' prefix is set
    """
    prefix_len = len(cmd) - len(cmd.lstrip(EXEC_PREFIX_CHARS))
    return PRIVILEGED_PREFIX in cmd[:prefix_len]


class _FragmentWriter:
    """Shared logic for creating and removing our fragment files."""

    KIND: FragmentKind

    def __init__(self, etc_dir: Path = PERSISTENT_UNIT_DIR, run_dir: Path = TRANSIENT_UNIT_DIR):
        """Initialize the writer.

        Args:
            etc_dir: Persistent unit search path
            run_dir: Transient unit search path
        """
        self.etc_dir = Path(etc_dir)
        self.run_dir = Path(run_dir)

    def fragment_path(self, unit: ServiceUnit, kind: Optional[FragmentKind] = None) -> Path:
        kind = kind or self.KIND
        base_dir = self.etc_dir if kind.persistent else self.run_dir
        return unit.fragment_path(kind, base_dir)

    def _check_absent(self, unit: ServiceUnit, conflicting_kind: FragmentKind) -> Path:
        """Ensure neither our fragment nor the conflicting one exists.

        Returns:
            Path of the fragment to create
        """
        fragment_path = self.fragment_path(unit)
        if fragment_path.is_file():
            raise FragmentExistsError(fragment_path)

        conflicting_path = self.fragment_path(unit, conflicting_kind)
        if conflicting_path.is_file():
            logger.error(f"{conflicting_kind.value.capitalize()} config at {conflicting_path} "
                         f"may conflict with {self.KIND.value}")
            raise FragmentConflictError(conflicting_path)

        return fragment_path

    def _write(self, fragment_path: Path, directives: Iterable[str]):
        """Create the fragment file exclusively and write its directives."""
        fragment_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(fragment_path, "x") as f:
                f.write(f"{GENERATED_HEADER}\n")
                f.write("[Service]\n")
                for directive in directives:
                    f.write(f"{directive}\n")
        except FileExistsError:
            raise FragmentExistsError(fragment_path) from None

        logger.info(f"Config fragment written in {fragment_path}")

    def remove(self, unit: ServiceUnit):
        """Remove the fragment.

        Args:
            unit: Service unit

        Raises:
            FileNotFoundError: If the fragment does not exist
        """
        fragment_path = self.fragment_path(unit)
        fragment_path.unlink()
        logger.info(f"{fragment_path} removed")


class ProfilingFragmentWriter(_FragmentWriter):
    """Writes the transient fragment that wraps start commands with the tracer."""

    KIND = FragmentKind.PROFILING

    def __init__(
        self,
        tracer_executable: str,
        locator: Optional[ConfigFileLocator] = None,
        etc_dir: Path = PERSISTENT_UNIT_DIR,
        run_dir: Path = TRANSIENT_UNIT_DIR,
        runtime_dir: Path = RUNTIME_DIR,
        name_allocator: Callable[[], str] = allocate_profile_data_dir_name,
    ):
        """Initialize the writer.

        Args:
            tracer_executable: Absolute path of the tracer program
            locator: Config file locator, defaults to one using 'systemctl'
            etc_dir: Persistent unit search path
            run_dir: Transient unit search path
            runtime_dir: Parent of systemd RuntimeDirectory= directories
            name_allocator: Returns a fresh profile data directory name
        """
        super().__init__(etc_dir=etc_dir, run_dir=run_dir)
        self.tracer_executable = tracer_executable
        self.locator = locator or ConfigFileLocator()
        self.runtime_dir = Path(runtime_dir)
        self.name_allocator = name_allocator

    def add(self, unit: ServiceUnit, hardening_opts: HardeningOptions) -> Path:
        """Create the profiling fragment for a unit.

        Args:
            unit: Service unit
            hardening_opts: Options passed through to the tracer

        Returns:
            Path of the written fragment

        Raises:
            FragmentExistsError: If a profiling fragment already exists
            FragmentConflictError: If a hardening fragment exists
        """
        fragment_path = self._check_absent(unit, FragmentKind.HARDENING)

        config_paths = self.locator.locate(unit)
        logger.info(f"Located unit config file(s): {', '.join(str(p) for p in config_paths)}")

        directives = self._build_directives(config_paths, hardening_opts)
        self._write(fragment_path, directives)
        return fragment_path

    def _build_directives(self, config_paths: List[Path], hardening_opts: HardeningOptions) -> List[str]:
        cmdline = hardening_opts.to_cmdline()
        directives = [
            # needed because the tracer becomes the main process
            "NotifyAccess=all",
            "Environment=PYTHONFAULTHANDLER=1",
        ]
        if read_directive_values("SystemCallFilter", config_paths):
            # Allow ptracing, only if a syscall filter is already in place, otherwise it becomes a whitelist
            directives.append("SystemCallFilter=@debug")
        directives.extend([
            # tracing may slow down enough to risk reaching some service timeouts
            "TimeoutStartSec=infinity",
            "KillMode=control-group",
            "StandardOutput=journal",
        ])

        profile_data_dir_name = self.name_allocator()
        profile_data_dir = self.runtime_dir / profile_data_dir_name
        directives.append(f"RuntimeDirectory={profile_data_dir_name}")

        # Wrap ExecStartXxx directives
        profile_data_paths = []
        for exec_start_opt in EXEC_START_DIRECTIVES:
            exec_start_cmds = read_directive_values(exec_start_opt, config_paths)
            if exec_start_cmds:
                directives.append(f"{exec_start_opt}=")
            for cmd in exec_start_cmds:
                if is_unconfined_command(cmd):
                    # Write command unchanged
                    directives.append(f"{exec_start_opt}={cmd}")
                    continue
                profile_data_path = profile_data_dir / f"{len(profile_data_paths) + 1:03d}"
                profile_data_paths.append(profile_data_path)
                directives.append(
                    f"{exec_start_opt}={self.tracer_executable} run {cmdline} "
                    f"-p {profile_data_path} -- {cmd}"
                )

        # Add invocation that merges previous profiles
        directives.append(
            f"ExecStopPost={self.tracer_executable} merge-profile-data {cmdline} "
            f"{' '.join(str(p) for p in profile_data_paths)}"
        )
        return directives


class HardeningFragmentWriter(_FragmentWriter):
    """Writes the persistent fragment holding the computed hardening options."""

    KIND = FragmentKind.HARDENING

    def add(self, unit: ServiceUnit, options: Iterable[OptionWithValue]) -> Path:
        """Create the hardening fragment for a unit.

        Args:
            unit: Service unit
            options: Hardening options, one directive each

        Returns:
            Path of the written fragment

        Raises:
            FragmentExistsError: If a hardening fragment already exists
            FragmentConflictError: If a profiling fragment exists
        """
        fragment_path = self._check_absent(unit, FragmentKind.PROFILING)
        self._write(fragment_path, (str(opt) for opt in options))
        return fragment_path
