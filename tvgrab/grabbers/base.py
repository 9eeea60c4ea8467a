"""
tvgrab.grabbers.base - Behaviour shared by all grabbers

A grabber knows how to list the provider's channels and how to grab
listings for a GrabSettings value. Configure mode, channel-only output
and settings resolution are implemented once here.
"""

import logging
from typing import Any, Dict, List, Optional

from ..ask import TerminalAsk, get_asker
from ..config import ConfigError, ConfigManager, GrabSettings
from ..downloader import PageDownloader
from ..xmltv import XmltvGenerator


class BaseGrabber:
    """Base class for provider grabbers"""

    name = "tv_grab"
    description = ""
    capabilities = ("baseline", "manualconfig")
    default_days = 7
    base_url = ""
    source_info_name = ""
    lang: Optional[str] = None
    # Environment variable overriding base_url
    url_env: Optional[str] = None

    def __init__(self, downloader: Optional[PageDownloader] = None,
                 base_url: Optional[str] = None):
        self.downloader = downloader or PageDownloader()
        if base_url:
            self.base_url = base_url.rstrip("/")

    @classmethod
    def add_arguments(cls, parser):
        """Add grabber specific command line options"""

    def get_asker(self, args) -> TerminalAsk:
        """Prompt front-end for --configure"""
        return get_asker()

    def settings_from_args(self, args, channels: Optional[List[str]] = None,
                           maps: Optional[Dict[str, str]] = None) -> GrabSettings:
        """GrabSettings from the command line, with the channel selection given"""
        return GrabSettings(
            days=args.days,
            offset=args.offset,
            output=args.output,
            channels=list(channels or []),
            maps=dict(maps or {}),
        )

    def fetch_channels(self, settings: Optional[GrabSettings] = None) -> List[Dict[str, Any]]:
        """Fetch all channels offered by the provider"""
        raise NotImplementedError

    def grab(self, settings: GrabSettings) -> bytes:
        """Grab listings and return the complete XMLTV document"""
        raise NotImplementedError

    def create_generator(self) -> XmltvGenerator:
        return XmltvGenerator(
            source_info_url=self.base_url,
            source_info_name=self.source_info_name,
            generator_name=self.name,
            lang=self.lang,
        )

    def list_channels(self, settings: Optional[GrabSettings] = None) -> bytes:
        """XMLTV document with every provider channel and no programmes"""
        channels = self.fetch_channels(settings)
        generator = self.create_generator()
        document = generator.render(channels)
        logging.info("%d channels listed", generator.station_count)
        return document.encode("utf-8")

    def configure(self, config_manager: ConfigManager, asker: TerminalAsk,
                  settings: Optional[GrabSettings] = None) -> int:
        """Ask which channels to grab and write the configuration file"""
        if config_manager.exists():
            # Previous answers become the defaults
            config_manager.load_config()

        asker.say(f"The configuration will be saved in '{config_manager.config_file}'.")
        asker.say("Fetching channel list from the provider...")
        channels = self.fetch_channels(settings)
        if not channels:
            raise ConfigError("The provider returned no channels, cannot configure")

        questions = [
            (f"Add channel {channel.get('name') or channel['id']} ({channel['id']})?",
             bool(config_manager.is_enabled(channel["id"])))
            for channel in channels
        ]
        answers = asker.ask_many_boolean(questions)

        config_manager.write_config(
            [(channel["id"], channel.get("name", ""), enabled)
             for channel, enabled in zip(channels, answers)],
            grabber_name=self.name,
        )
        enabled_count = sum(1 for enabled in answers if enabled)
        asker.say(f"{enabled_count} of {len(channels)} channels selected.")
        return enabled_count

    def resolve_settings(self, args, config_manager: ConfigManager) -> GrabSettings:
        """Combine command line and configuration file into GrabSettings"""
        config = config_manager.load_config()
        config_manager.log_config_summary()

        if not config["channels"]:
            raise ConfigError(
                f"No channels enabled in {config_manager.config_file}, "
                "please run the grabber with --configure"
            )

        return self.settings_from_args(args, config["channels"], config["maps"])

    def close(self):
        self.downloader.close()
