"""
tvgrab.grabbers.ch_search - Switzerland grabber (tv.search.ch)

Scrapes the tv.search.ch website:

1. the channel index lists channel groups, each group page lists channels;
2. for each requested day and group, the listing page holds one row per
   channel made of segments (one per programme slot) carrying a link and a
   start time of day;
3. each segment links to a detail page with title, sub-title, category,
   production year and the time range.

Listing pages only carry HH:MM values. The page of day D runs until early
morning, so a slot before 06:00 belongs to D+1.

Any page that does not have the expected shape aborts the grab.
"""

import logging
import re
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..ask import get_asker
from ..channels import ChannelMap
from ..config import ConfigError, GrabSettings
from ..utils import HtmlUtils, TimeUtils
from .base import BaseGrabber


class ScrapeError(Exception):
    """Raised when a scraped page does not have the expected structure"""


class SearchChGrabber(BaseGrabber):
    """Grabber for tv.search.ch"""

    name = "tv_grab_ch_search"
    description = "Switzerland (tv.search.ch)"
    capabilities = ("baseline", "manualconfig", "share")
    default_days = 7
    base_url = "https://tv.search.ch"
    source_info_name = "tv.search.ch"
    lang = "de"
    url_env = "TVGRAB_CH_URL"
    timezone = "Europe/Zurich"

    # Page structure
    GROUP_SELECTOR = "a.tv-group[data-group]"
    CHANNEL_SELECTOR = "div.tv-channel[data-channel]"
    CHANNEL_NAME_SELECTOR = ".tv-channel-name"
    CHANNEL_LOGO_SELECTOR = "img.tv-channel-logo"
    ROW_SELECTOR = 'div.tv-channel-row[data-channel="{slug}"]'
    SEGMENT_SELECTOR = "a.tv-segment"
    SEGMENT_TIME_SELECTOR = ".tv-time"
    TITLE_SELECTOR = "h1.tv-title"
    SUBTITLE_SELECTOR = ".tv-subtitle"
    CATEGORY_SELECTOR = ".tv-category"
    YEAR_SELECTOR = ".tv-year"
    TIME_RANGE_SELECTOR = ".tv-time-range"
    DESCRIPTION_SELECTOR = ".tv-description"

    YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument(
            "--gui",
            nargs="?",
            const="Tk",
            metavar="OPTION",
            help="Prompt front-end for --configure (terminal prompts are always available)",
        )
        parser.add_argument(
            "--share",
            type=Path,
            metavar="DIR",
            help="Directory holding the channel_ids mapping file",
        )

    def get_asker(self, args):
        return get_asker(args.gui)

    def settings_from_args(self, args, channels=None, maps=None) -> GrabSettings:
        settings = super().settings_from_args(args, channels, maps)
        settings.share_dir = args.share
        return settings

    def load_channel_map(self, settings: Optional[GrabSettings] = None) -> ChannelMap:
        """Channel name table from the share directory of settings"""
        share_dir = settings.share_dir if settings is not None else None
        return ChannelMap.from_share_dir(self.name, share_dir)

    def _url(self, href: str) -> str:
        return urljoin(self.base_url + "/", href)

    def _soup(self, url: str, params: Optional[Dict[str, str]] = None) -> BeautifulSoup:
        # Raw bytes so the declared page charset is honoured
        return BeautifulSoup(self.downloader.fetch(url, params=params), "lxml")

    # Channels

    def fetch_groups(self) -> List[Dict[str, str]]:
        """Channel groups from the channel index"""
        url = self._url("/channels")
        soup = self._soup(url)
        groups = []
        for link in soup.select(self.GROUP_SELECTOR):
            groups.append(
                {"id": link["data-group"], "name": HtmlUtils.clean_text(link.get_text())}
            )
        if not groups:
            raise ScrapeError(f"No channel groups found on {url}")
        logging.debug("Found %d channel groups", len(groups))
        return groups

    def parse_group_channels(self, soup: BeautifulSoup, group_id: str,
                             channel_map: ChannelMap) -> List[Dict[str, Any]]:
        channels = []
        for entry in soup.select(self.CHANNEL_SELECTOR):
            slug = entry["data-channel"].strip()
            name_tag = entry.select_one(self.CHANNEL_NAME_SELECTOR)
            if name_tag is None:
                raise ScrapeError(f"Channel '{slug}' in group '{group_id}' has no name")
            name = HtmlUtils.clean_text(name_tag.get_text())

            logo = entry.select_one(self.CHANNEL_LOGO_SELECTOR)
            icon = self._url(logo["src"]) if logo is not None and logo.get("src") else None

            channels.append(
                {
                    "id": channel_map.lookup(name) or f"{slug}.search.ch",
                    "name": name,
                    "icon": icon,
                    "slug": slug,
                    "group": group_id,
                }
            )
        return channels

    def fetch_channels(self, settings: Optional[GrabSettings] = None) -> List[Dict[str, Any]]:
        """All channels of all groups, first group wins for duplicates"""
        channel_map = self.load_channel_map(settings)
        channels: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        for group in self.fetch_groups():
            soup = self._soup(self._url("/channels"), params={"group": group["id"]})
            group_channels = self.parse_group_channels(soup, group["id"], channel_map)
            logging.info("Group %s: %d channels", group["name"] or group["id"],
                         len(group_channels))
            for channel in group_channels:
                channels.setdefault(channel["id"], channel)

        logging.info("%d channels available (%d mapped by %s)", len(channels),
                     len(channel_map), channel_map.mapping_file)
        return list(channels.values())

    # Listings

    def parse_segments(self, soup: BeautifulSoup, slug: str) -> List[Dict[str, Any]]:
        """Programme references (detail url, start clock) of one channel row"""
        row = soup.select_one(self.ROW_SELECTOR.format(slug=slug))
        if row is None:
            raise ScrapeError(f"No listing row for channel '{slug}'")

        segments = []
        for segment in row.select(self.SEGMENT_SELECTOR):
            href = segment.get("href")
            if not href:
                raise ScrapeError(f"Segment without programme link in row '{slug}'")
            time_tag = segment.select_one(self.SEGMENT_TIME_SELECTOR)
            clock = TimeUtils.parse_clock(time_tag.get_text()) if time_tag else None
            if clock is None:
                raise ScrapeError(f"Segment {href} in row '{slug}' has no start time")
            segments.append({"url": self._url(href), "clock": clock})
        return segments

    def parse_detail(self, soup: BeautifulSoup, url: str) -> Dict[str, Any]:
        """Programme attributes from a detail page"""
        title_tag = soup.select_one(self.TITLE_SELECTOR)
        if title_tag is None or not title_tag.get_text(strip=True):
            raise ScrapeError(f"No programme title on {url}")

        detail: Dict[str, Any] = {"title": HtmlUtils.clean_text(title_tag.get_text())}

        for key, selector in (
            ("sub_title", self.SUBTITLE_SELECTOR),
            ("category", self.CATEGORY_SELECTOR),
            ("desc", self.DESCRIPTION_SELECTOR),
        ):
            tag = soup.select_one(selector)
            if tag is not None:
                text = HtmlUtils.clean_text(tag.get_text())
                if text:
                    detail[key] = text

        year_tag = soup.select_one(self.YEAR_SELECTOR)
        if year_tag is not None:
            match = self.YEAR_PATTERN.search(year_tag.get_text())
            if match:
                detail["date"] = match.group(0)

        time_tag = soup.select_one(self.TIME_RANGE_SELECTOR)
        if time_tag is not None:
            clocks = TimeUtils.TIME_PATTERN.findall(time_tag.get_text())
            if len(clocks) >= 2:
                detail["stop_clock"] = TimeUtils.parse_clock(":".join(clocks[1]))

        return detail

    def grab_channel_day(self, soup: BeautifulSoup, channel: Dict[str, Any],
                         processing_day, settings: GrabSettings) -> List[Dict[str, Any]]:
        """Programmes of one channel on the listing page of processing_day"""
        segments = self.parse_segments(soup, channel["slug"])
        programmes = []

        for segment in segments:
            day = TimeUtils.slot_date(processing_day, segment["clock"])
            start = TimeUtils.localize(day, segment["clock"], self.timezone)

            detail = self.parse_detail(self._soup(segment["url"]), segment["url"])
            stop_clock = detail.pop("stop_clock", None)

            programme = {"channel": settings.output_id(channel["id"]), "start": start}
            if stop_clock is not None:
                programme["stop"] = TimeUtils.stop_after(start, stop_clock)
            programme.update(detail)
            programmes.append(programme)

        # Slots without an explicit stop end where the next one starts
        for current, following in zip(programmes, programmes[1:]):
            if "stop" not in current and following["start"] > current["start"]:
                current["stop"] = following["start"]

        return programmes

    def grab(self, settings: GrabSettings) -> bytes:
        available = {channel["id"]: channel for channel in self.fetch_channels(settings)}

        selected = []
        for channel_id in settings.channels:
            if channel_id in available:
                selected.append(available[channel_id])
            else:
                logging.warning("Configured channel %s is not offered by %s, skipping",
                                channel_id, self.source_info_name)
        if not selected:
            raise ConfigError(
                f"None of the configured channels is offered by {self.source_info_name}, "
                "please run the grabber with --configure"
            )

        programmes: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict(
            (channel["id"], []) for channel in selected
        )
        groups = list(OrderedDict.fromkeys(channel["group"] for channel in selected))
        dates = TimeUtils.grab_dates(settings.days, settings.offset)

        for day_number, processing_day in enumerate(dates, start=1):
            logging.info("Grabbing %s (day %d/%d)", processing_day.isoformat(), day_number,
                         len(dates))
            for group_id in groups:
                soup = self._soup(
                    self._url("/"), params={"group": group_id, "date": processing_day.isoformat()}
                )
                for channel in selected:
                    if channel["group"] != group_id:
                        continue
                    day_programmes = self.grab_channel_day(soup, channel, processing_day,
                                                           settings)
                    logging.debug("  %s: %d programmes", channel["name"], len(day_programmes))
                    programmes[channel["id"]].extend(day_programmes)

        generator = self.create_generator()
        document = generator.render(
            [
                {"id": settings.output_id(channel["id"]), "name": channel["name"],
                 "icon": channel.get("icon")}
                for channel in selected
            ],
            [programme for channel_programmes in programmes.values()
             for programme in channel_programmes],
        )
        logging.info("%d Stations and %d Programmes written", generator.station_count,
                     generator.episode_count)
        return document.encode("utf-8")
