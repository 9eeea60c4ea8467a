#!/usr/bin/env python3
"""
tvgrab - grabber main flow

parse options -> configure | list channels | grab -> write -> exit status
"""

import logging
import os
import sys
import time

from . import __version__
from .args import ArgumentParser
from .config import ConfigError, ConfigManager
from .downloader import FetchError
from .grabbers import CzechGrabber, ScrapeError, SearchChGrabber
from .xmltv import write_output


def setup_logging(logging_config: dict):
    """Setup logging on stderr; stdout is reserved for XMLTV output"""
    if logging_config["level"] == "debug":
        level = logging.DEBUG
    elif logging_config["level"] == "error":
        level = logging.ERROR
    else:  # default
        level = logging.INFO

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # urllib3 connection chatter is only useful when debugging
    logging.getLogger("urllib3").setLevel(logging.DEBUG if level == logging.DEBUG
                                          else logging.WARNING)
    return console_handler


def run(grabber_class, argv=None) -> int:
    """Run one grabber invocation and return the process exit status"""
    python_start_time = time.time()

    # Parse command line arguments (informational modes exit here)
    arg_parser = ArgumentParser(grabber_class)
    args = arg_parser.parse_args(argv)

    setup_logging(arg_parser.get_logging_config(args))

    defaults = arg_parser.get_system_defaults()
    config_file = args.config_file or defaults["config_file"]

    base_url = os.environ.get(grabber_class.url_env) if grabber_class.url_env else None
    grabber = grabber_class(base_url=base_url)

    try:
        config_manager = ConfigManager(config_file)

        logging.info("%s session started - Version %s", grabber.name, __version__)
        logging.debug("Provider: %s", grabber.base_url)

        if args.configure:
            grabber.configure(config_manager, grabber.get_asker(args),
                              grabber.settings_from_args(args))
            return 0

        if args.list_channels:
            write_output(grabber.list_channels(grabber.settings_from_args(args)), args.output)
            return 0

        settings = grabber.resolve_settings(args, config_manager)
        logging.info("TV Guide duration: %d days, offset %d", settings.days, settings.offset)

        document = grabber.grab(settings)
        write_output(document, settings.output)

        stats = grabber.downloader.get_statistics()
        logging.info("Requests: %d pages, %d failed attempts, %.2f MB downloaded",
                     stats["total_requests"], stats["failed_attempts"],
                     stats["bytes_downloaded"] / (1024 * 1024))
        logging.info("%s session ended successfully (%.2f seconds)", grabber.name,
                     time.time() - python_start_time)
        return 0

    except ConfigError as e:
        logging.error("Configuration error: %s", e)
        return 1
    except FetchError as e:
        logging.error("Download failed: %s", e)
        return 1
    except ScrapeError as e:
        logging.error("Unexpected page structure, aborting: %s", e)
        return 1
    except KeyboardInterrupt:
        logging.error("Interrupted by user")
        return 1
    except Exception as e:
        logging.exception("Critical error: %s", str(e))
        return 1
    finally:
        grabber.close()


def main_cz():
    """Console entry point for tv_grab_cz"""
    return run(CzechGrabber)


def main_ch_search():
    """Console entry point for tv_grab_ch_search"""
    return run(SearchChGrabber)

