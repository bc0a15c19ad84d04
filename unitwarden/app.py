"""Main application coordinator for unitwarden."""

import logging
from typing import Callable, List, Optional

from .core.config_locator import ConfigFileLocator
from .core.config_manager import ConfigManager
from .core.fragments import HardeningFragmentWriter, ProfilingFragmentWriter
from .core.profiling_result import ProfilingResultReader
from .core.service_controller import ServiceController
from .models.options import HardeningOptions, OptionWithValue
from .models.service import ServiceUnit
from .utils.executable import current_executable

logger = logging.getLogger(__name__)

# Turns the options read back from the journal into the options to install
Policy = Callable[[List[OptionWithValue]], List[OptionWithValue]]


def passthrough_policy(options: List[OptionWithValue]) -> List[OptionWithValue]:
    return list(options)


class UnitWardenApp:
    """Main application coordinator.

    Chains the profiling and hardening steps for a unit.
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        profiling_writer: Optional[ProfilingFragmentWriter] = None,
        hardening_writer: Optional[HardeningFragmentWriter] = None,
        result_reader: Optional[ProfilingResultReader] = None,
        policy: Policy = passthrough_policy,
    ):
        """Initialize the application.

        Args:
            config_manager: Loaded configuration
            profiling_writer: Profiling fragment writer, built from config if None
            hardening_writer: Hardening fragment writer, built from config if None
            result_reader: Profiling result reader, built from config if None
            policy: Derives the options to install from the profiling result
        """
        self.config_manager = config_manager
        self.systemctl_command = config_manager.get_setting("systemctl_command", "systemctl")

        if profiling_writer is None:
            tracer = config_manager.get_setting("tracer_executable") or current_executable()
            profiling_writer = ProfilingFragmentWriter(
                tracer_executable=tracer,
                locator=ConfigFileLocator(self.systemctl_command),
            )
        self.profiling_writer = profiling_writer
        self.hardening_writer = hardening_writer or HardeningFragmentWriter()
        self.result_reader = result_reader or ProfilingResultReader(
            config_manager.get_setting("journalctl_command", "journalctl")
        )
        self.policy = policy

    def controller(self, unit: ServiceUnit) -> ServiceController:
        return ServiceController(unit, self.systemctl_command)

    def start_profile(self, unit: ServiceUnit, hardening_opts: HardeningOptions, no_restart: bool = False):
        """Set up profiling for a unit and restart it.

        Args:
            unit: Service unit
            hardening_opts: Options passed through to the tracer
            no_restart: Only write the profiling config
        """
        self.profiling_writer.add(unit, hardening_opts)

        if no_restart:
            logger.warning("Profiling config will only be applied when systemd config is reloaded, "
                           "and service restarted")
            return

        controller = self.controller(unit)
        controller.reload()
        controller.action("restart", block=False)

    def finish_profile(
        self,
        unit: ServiceUnit,
        apply: bool = False,
        no_restart: bool = False,
    ) -> List[OptionWithValue]:
        """Stop profiling a unit and optionally install its hardening config.

        Args:
            unit: Service unit
            apply: Write the hardening fragment
            no_restart: Do not start the unit afterwards

        Returns:
            Resolved hardening options
        """
        controller = self.controller(unit)
        controller.action("stop", block=True)
        self.profiling_writer.remove(unit)

        resolved_opts = self.policy(self.result_reader.read(unit))
        logger.info(f"Resolved systemd options: {', '.join(str(o) for o in resolved_opts)}")

        if apply and resolved_opts:
            self.hardening_writer.add(unit, resolved_opts)

        controller.reload()
        if not no_restart:
            controller.action("start", block=False)

        return resolved_opts

    def reset(self, unit: ServiceUnit):
        """Remove all unitwarden config for a unit.

        Args:
            unit: Service unit
        """
        for writer in (self.profiling_writer, self.hardening_writer):
            try:
                writer.remove(unit)
            except FileNotFoundError:
                logger.info(f"No {writer.KIND.value} config to remove for {unit}")

        controller = self.controller(unit)
        controller.reload()
        controller.action("try-restart", block=False)
