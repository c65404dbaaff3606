#!/usr/bin/env python3
import argparse
import logging
import os
import sys
from types import SimpleNamespace

from src.config import Config
from src.defaults import DEFAULT_CONFIG_FILE_PATH, PROGRAM_DESCRIPTION
from src.exceptions import WorkflowError
from src.utility import (get_config_options, merge_options, save_config,
                         setup_logging)
from src.workflow import rename_only, run, run_backup_cleanup

__version__ = "1.0.0"

logger = logging.getLogger('rename_sony_photos')


def parse_args(args=None):
    parser = argparse.ArgumentParser(
        description=PROGRAM_DESCRIPTION,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.version = f"v{__version__}"

    parser.add_argument(
        '-v',
        '--version',
        action='version',
    )

    parser.add_argument(
        '--config',
        dest='config_file',
        help="""\
Path to a YAML configuration file. Without it ./config.yaml and then
~/.config/rename-sony-photos/config.yaml are tried, falling back to built-in defaults.
""",
    )

    parser.add_argument(
        '--path',
        dest='path',
        help="""\
Directory whose camera-named sub-directories are renamed in place
(overrides target_path from the configuration).
""",
    )

    parser.add_argument(
        '--create-config',
        action='store_true',
        help=f"Write the default configuration to {DEFAULT_CONFIG_FILE_PATH} and exit.",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--workflow',
        action='store_true',
        help="Run the full workflow: copy, rename, delete and eject.",
    )
    mode.add_argument(
        '--backup-cleanup',
        action='store_true',
        help="Delete the photos from the backup card and eject it.",
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help="Show what would be done without making any changes.",
    )

    parser.add_argument(
        '--log',
        help="Also write log messages to this file.",
    )

    exclusive_group_debug_silent = parser.add_mutually_exclusive_group()

    exclusive_group_debug_silent.add_argument(
        '--debug',
        action='store_true',
        default=os.environ.get('LOGLEVEL') == "DEBUG",
        help="Enable debug messages.",
    )

    exclusive_group_debug_silent.add_argument(
        '--quiet',
        action='store_true',
        help="Only report warnings and errors.",
    )

    return parser.parse_args(args)


def create_config(path=DEFAULT_CONFIG_FILE_PATH):
    save_config(Config(), path)
    logger.info(f"Default configuration file created: {path}")


def log_dry_run_banner(options):
    if options.dry_run:
        logger.info("=== DRY RUN MODE ===")
        logger.info("No actual changes will be made")


def main(options):
    if options.create_config:
        create_config()
        return

    config = get_config_options(options)
    overrides = SimpleNamespace(
        dry_run=options.dry_run,
        debug=options.debug,
        quiet=options.quiet,
        log=options.log,
    )
    config = merge_options(config, overrides)
    context = config.context()

    if options.workflow:
        log_dry_run_banner(config)
        logger.info("Starting workflow: copy, rename, and delete")
        run(context)
        logger.info("Workflow completed successfully")
    elif options.backup_cleanup:
        log_dry_run_banner(config)
        logger.info("Starting backup cleanup")
        run_backup_cleanup(context)
        logger.info("Backup cleanup completed successfully")
    else:
        path = options.path or config.target_path or '.'
        log_dry_run_banner(config)
        rename_only(path, config.dry_run)
        logger.info("Directory renaming completed successfully")


def cli(args=None):
    options = parse_args(args)
    setup_logging(options)
    try:
        main(options)
    except (WorkflowError, OSError, RuntimeError) as e:
        logger.error(e)
        return 1
    except KeyboardInterrupt:
        logger.error("Exiting...")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(cli())
