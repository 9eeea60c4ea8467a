"""
tvgrab.args - Command line argument parsing

XMLTV grabber conventions shared by every grabber, with a hook for the
options a single grabber adds.
"""

import argparse
import logging
import re
import sys
from pathlib import Path


class _GrabberArgumentParser(argparse.ArgumentParser):
    """argparse parser whose usage errors exit with status 1"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


class ArgumentParser:
    """Command line argument parser for a grabber class"""

    # Validation patterns
    DAYS_PATTERN = re.compile(r"^[1-9]$|^1[0-4]$")  # 1-14 days
    OFFSET_PATTERN = re.compile(r"^[0-9]$|^1[0-3]$")  # 0-13 days

    def __init__(self, grabber_class):
        self.grabber_class = grabber_class
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the argument parser with baseline grabber options"""
        name = self.grabber_class.name
        parser = _GrabberArgumentParser(
            prog=name,
            description=self.grabber_class.description,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=f"""
Examples:
  {name} --configure
  {name} --list-channels
  {name} --days 2 --offset 1 --output listings.xml
  {name} --days 1 --quiet > today.xml

Configuration:
  Default config: ~/.xmltv/{name}.conf

Logging Levels (always on stderr, XML goes to stdout or --output):
  (default)       Informational messages, warnings and errors
  --debug         All debug information
  --quiet         Errors only
""",
        )

        # XMLTV baseline modes
        mode_group = parser.add_mutually_exclusive_group()
        mode_group.add_argument(
            "--configure", action="store_true", help="Interactively select channels and exit"
        )
        mode_group.add_argument(
            "--list-channels",
            action="store_true",
            help="Output all available channels as XMLTV and exit",
        )
        mode_group.add_argument(
            "--capabilities", action="store_true", help="Show capabilities and exit"
        )
        mode_group.add_argument(
            "--description", action="store_true", help="Show grabber description and exit"
        )
        mode_group.add_argument("--version", action="store_true", help="Show version and exit")

        # Log level selection
        level_group = parser.add_mutually_exclusive_group()
        level_group.add_argument(
            "--quiet", action="store_true", help="Only errors on stderr"
        )
        level_group.add_argument(
            "--debug", action="store_true", help="All debug information on stderr"
        )

        parser.add_argument("--config-file", type=Path, help="Configuration file path")
        parser.add_argument(
            "--output", type=Path, help="Write XMLTV output to FILE instead of stdout"
        )
        parser.add_argument(
            "--days",
            type=int,
            help=f"Number of days to grab (1-14, default: {self.grabber_class.default_days})",
        )
        parser.add_argument(
            "--offset", type=int, help="Start with data for today plus N days (0-13, default: 0)"
        )

        # Grabber specific options
        self.grabber_class.add_arguments(parser)

        return parser

    def parse_args(self, args=None):
        """Parse command line arguments, handling the informational modes"""
        args = self.parser.parse_args(args)

        if args.description:
            print(self.grabber_class.description)
            sys.exit(0)

        if args.version:
            from . import __version__

            print(f"{self.grabber_class.name} {__version__}")
            sys.exit(0)

        if args.capabilities:
            print("\n".join(self.grabber_class.capabilities))
            sys.exit(0)

        self._validate_args(args)
        return args

    def _validate_args(self, args):
        """Validate argument values"""
        if args.days is None:
            args.days = self.grabber_class.default_days
        elif not self.DAYS_PATTERN.match(str(args.days)):
            self.parser.error(f"Parameter [--days] must be 1-14, got: {args.days}")

        if args.offset is None:
            args.offset = 0
        elif not self.OFFSET_PATTERN.match(str(args.offset)):
            self.parser.error(f"Parameter [--offset] must be 0-13, got: {args.offset}")

        logging.debug("Grab range: %d days from offset %d", args.days, args.offset)

    def get_logging_config(self, args):
        """Determine logging configuration from arguments"""
        config = {"level": "default", "quiet": False}

        if args.debug:
            config["level"] = "debug"
        elif args.quiet:
            config["level"] = "error"
            config["quiet"] = True

        return config

    def get_system_defaults(self):
        """Get default file locations"""
        base_dir = Path.home() / ".xmltv"
        return {
            "base_dir": base_dir,
            "config_file": base_dir / f"{self.grabber_class.name}.conf",
        }
