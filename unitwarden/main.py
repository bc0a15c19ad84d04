#!/usr/bin/env python3
"""Entry point for unitwarden."""

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from .app import UnitWardenApp
from .core import tracer
from .core.config_manager import ConfigManager
from .errors import UnitWardenError
from .models.options import HardeningOptions
from .models.service import ServiceUnit
from .utils.constants import APP_NAME, APP_VERSION, HARDENING_MODES


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Set up application logging.

    Args:
        level: Logging level name
        log_file: Optional file to also log to
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def add_hardening_arguments(parser: argparse.ArgumentParser):
    """Add the hardening option flags shared by several commands.

    Args:
        parser: Parser to add the flags to
    """
    parser.add_argument('-m', '--mode', choices=HARDENING_MODES,
                        help='Hardening mode (default from config)')
    parser.add_argument('-n', '--network-firewalling', action='store_true', default=None,
                        help='Enable IP address firewalling')
    parser.add_argument('-f', '--filesystem-whitelisting', action='store_true', default=None,
                        help='Enable filesystem path whitelisting')
    parser.add_argument('--merge-paths-threshold', type=int,
                        help='Path count above which paths are merged into their parent')


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} - Automatic systemd service hardening guided by profiling",
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {APP_VERSION}")
    parser.add_argument('-c', '--config', type=Path,
                        help='Config file (default: $UNITWARDEN_CONFIG or /etc/unitwarden/config.yaml)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)
    service_parser = subparsers.add_parser('service', help='Act on a systemd service unit')
    actions = service_parser.add_subparsers(dest='action', required=True)

    start = actions.add_parser('start-profile', help='Add profiling config and restart the service')
    start.add_argument('unit', help='Service unit name, e.g. nginx or getty@tty1')
    add_hardening_arguments(start)
    start.add_argument('--no-restart', action='store_true',
                       help='Only write config, do not reload systemd or restart the service')

    finish = actions.add_parser('finish-profile', help='Stop profiling and get the resulting options')
    finish.add_argument('unit', help='Service unit name')
    finish.add_argument('-a', '--apply', action='store_true',
                        help='Install the resulting hardening config')
    finish.add_argument('--no-restart', action='store_true',
                        help='Do not start the service afterwards')

    reset = actions.add_parser('reset', help='Remove all profiling and hardening config')
    reset.add_argument('unit', help='Service unit name')

    # Modes used by the commands of a profiling fragment
    run_parser = subparsers.add_parser('run', help='Record and run a service start command')
    add_hardening_arguments(run_parser)
    run_parser.add_argument('-p', '--profile-data-path', type=Path, required=True,
                            help='File receiving the profile record')
    run_parser.add_argument('cmd', nargs='+', metavar='COMMAND',
                            help='Command to run, after --')

    merge = subparsers.add_parser('merge-profile-data',
                                  help='Merge profile records and log the resulting options')
    add_hardening_arguments(merge)
    merge.add_argument('paths', nargs='*', type=Path, metavar='PATH',
                       help='Profile record files')

    return parser


def hardening_options_from_args(args: argparse.Namespace, config_manager: ConfigManager) -> HardeningOptions:
    """Merge command line flags over the configured hardening options.

    Args:
        args: Parsed arguments of a command taking hardening flags
        config_manager: Loaded configuration

    Returns:
        HardeningOptions instance
    """
    defaults = config_manager.get_hardening_options()
    return HardeningOptions(
        mode=args.mode or defaults.mode,
        network_firewalling=args.network_firewalling or defaults.network_firewalling,
        filesystem_whitelisting=args.filesystem_whitelisting or defaults.filesystem_whitelisting,
        merge_paths_threshold=(args.merge_paths_threshold
                               if args.merge_paths_threshold is not None
                               else defaults.merge_paths_threshold),
    )


def run(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    """Run the requested command.

    Args:
        args: Parsed arguments
        config_manager: Loaded configuration

    Returns:
        Process exit code
    """
    if args.command == 'run':
        return tracer.run_command(args.cmd, args.profile_data_path,
                                  hardening_options_from_args(args, config_manager))
    if args.command == 'merge-profile-data':
        tracer.merge_profile_data(args.paths, hardening_options_from_args(args, config_manager))
        return 0

    app = UnitWardenApp(config_manager)
    unit = ServiceUnit.from_string(args.unit)

    if args.action == 'start-profile':
        app.start_profile(unit, hardening_options_from_args(args, config_manager), args.no_restart)
    elif args.action == 'finish-profile':
        for opt in app.finish_profile(unit, apply=args.apply, no_restart=args.no_restart):
            print(opt)
    elif args.action == 'reset':
        app.reset(unit)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config_manager = ConfigManager(args.config)
    setup_logging()
    config_manager.load_config()
    level = "DEBUG" if args.verbose else config_manager.get_setting("log_level", "INFO")
    setup_logging(level, config_manager.get_setting("log_file"))
    logger = logging.getLogger(__name__)

    try:
        return run(args, config_manager)
    except (UnitWardenError, OSError, subprocess.SubprocessError, ValueError) as e:
        logger.error(f"{getattr(args, 'action', args.command)} failed: {e}")
        logger.debug("Traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
