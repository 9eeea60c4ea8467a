"""
tvgrab.grabbers.cz - Czech Republic grabber

The provider API serves its channel list as JSON and complete XMLTV
listings for a date range and channel selection; the listings document is
passed through unchanged.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..config import ConfigError, ConfigManager, GrabSettings
from ..downloader import FetchError
from ..utils import HtmlUtils, TimeUtils
from .base import BaseGrabber


class CzechGrabber(BaseGrabber):
    """Grabber for the Czech XMLTV API"""

    name = "tv_grab_cz"
    description = "Czech Republic (xmltv.cz JSON/XML API)"
    capabilities = ("baseline", "manualconfig")
    default_days = 5
    base_url = "https://xmltv.cz/api"
    source_info_name = "xmltv.cz"
    lang = "cs"
    url_env = "TVGRAB_CZ_URL"
    charset = "utf-8"

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument(
            "--channel",
            action="append",
            metavar="ID",
            dest="channel_ids",
            help="Grab this channel id (repeatable, overrides the configuration file)",
        )

    def fetch_channels(self, settings: Optional[GrabSettings] = None) -> List[Dict[str, Any]]:
        """Fetch channel list from the JSON endpoint"""
        url = f"{self.base_url}/channels.json"
        logging.info("Fetching channel list from %s", url)
        content = self.downloader.fetch(url)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise FetchError(f"Invalid channel list received from {url}: {e}")

        if isinstance(data, dict):
            data = data.get("channels", [])

        channels = []
        for entry in data:
            channel_id = entry.get("id")
            if not channel_id:
                logging.debug("Skipping channel entry without id: %s", entry)
                continue
            channels.append(
                {
                    "id": channel_id,
                    "name": HtmlUtils.clean_text(entry.get("name")),
                    "icon": entry.get("icon"),
                }
            )

        logging.info("%d channels available", len(channels))
        return channels

    def resolve_settings(self, args, config_manager: ConfigManager) -> GrabSettings:
        if args.channel_ids:
            logging.info("Using %d channel(s) from the command line", len(args.channel_ids))
            return self.settings_from_args(args, args.channel_ids)

        settings = super().resolve_settings(args, config_manager)
        if settings.maps:
            logging.warning(
                "%d map directive(s) ignored: %s passes provider listings through unchanged",
                len(settings.maps),
                self.name,
            )
        return settings

    def build_query(self, settings: GrabSettings) -> Dict[str, str]:
        """Query parameters for the listings endpoint"""
        dates = TimeUtils.grab_dates(settings.days, settings.offset)
        return {
            "from": dates[0].isoformat(),
            "to": dates[-1].isoformat(),
            "channels": ",".join(settings.channels),
            "charset": self.charset,
        }

    def grab(self, settings: GrabSettings) -> bytes:
        """Fetch the listings document for the configured channels"""
        if not settings.channels:
            raise ConfigError("No channels selected, please run the grabber with --configure")

        params = self.build_query(settings)
        url = f"{self.base_url}/listings.xml"
        logging.info(
            "Fetching listings %s to %s for %d channel(s)",
            params["from"],
            params["to"],
            len(settings.channels),
        )
        payload = self.downloader.fetch(url, params=params)
        logging.info("Listings received: %d bytes", len(payload))
        return payload
