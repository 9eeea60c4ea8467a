"""
tvgrab.xmltv - XMLTV generation (DTD compliant)

Renders channel and programme records into an XMLTV document and writes
finished documents to a file or standard output.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .utils import HtmlUtils, TimeUtils


class XmltvGenerator:
    """Generates XMLTV documents from channel and programme records"""

    def __init__(self, source_info_url: str = "", source_info_name: str = "",
                 generator_name: str = "tvgrab", lang: Optional[str] = None):
        self.source_info_url = source_info_url
        self.source_info_name = source_info_name
        self.generator_name = generator_name
        self.lang = lang
        self.station_count = 0
        self.episode_count = 0

    def render(self, channels: Iterable[Dict[str, Any]],
               programmes: Iterable[Dict[str, Any]] = ()) -> str:
        """Render a complete document"""
        lines: List[str] = []
        self._print_header(lines)
        self._print_stations(lines, channels)
        self._print_episodes(lines, programmes)
        self._print_footer(lines)
        return "".join(lines)

    def _print_header(self, out: List[str]):
        out.append('<?xml version="1.0" encoding="utf-8"?>\n')
        out.append('<!DOCTYPE tv SYSTEM "xmltv.dtd">\n')
        attributes = [f'generator-info-name="{HtmlUtils.conv_html(self.generator_name)}"']
        if self.source_info_url:
            attributes.append(f'source-info-url="{HtmlUtils.conv_html(self.source_info_url)}"')
        if self.source_info_name:
            attributes.append(f'source-info-name="{HtmlUtils.conv_html(self.source_info_name)}"')
        out.append(f"<tv {' '.join(attributes)}>\n")

    def _print_footer(self, out: List[str]):
        out.append("</tv>\n")

    def _lang_attr(self) -> str:
        return f' lang="{self.lang}"' if self.lang else ""

    def _print_stations(self, out: List[str], channels: Iterable[Dict[str, Any]]):
        """Print channel elements"""
        self.station_count = 0

        for channel in channels:
            out.append(f'\t<channel id="{HtmlUtils.conv_html(channel["id"])}">\n')

            if channel.get("name"):
                out.append(
                    f"\t\t<display-name{self._lang_attr()}>"
                    f"{HtmlUtils.conv_html(channel['name'])}</display-name>\n"
                )

            if channel.get("icon"):
                out.append(f'\t\t<icon src="{HtmlUtils.conv_html(channel["icon"])}" />\n')

            out.append("\t</channel>\n")
            self.station_count += 1

    def _print_episodes(self, out: List[str], programmes: Iterable[Dict[str, Any]]):
        """Print programme elements in DTD child order"""
        self.episode_count = 0
        lang = self._lang_attr()

        for programme in programmes:
            attributes = f'start="{TimeUtils.conv_time(programme["start"])}"'
            if programme.get("stop"):
                attributes += f' stop="{TimeUtils.conv_time(programme["stop"])}"'
            attributes += f' channel="{HtmlUtils.conv_html(programme["channel"])}"'
            out.append(f"\t<programme {attributes}>\n")

            # 1. TITLE+
            out.append(f"\t\t<title{lang}>{HtmlUtils.conv_html(programme['title'])}</title>\n")

            # 2. SUB-TITLE*
            if programme.get("sub_title"):
                out.append(
                    f"\t\t<sub-title{lang}>{HtmlUtils.conv_html(programme['sub_title'])}"
                    "</sub-title>\n"
                )

            # 3. DESC*
            if programme.get("desc"):
                out.append(f"\t\t<desc{lang}>{HtmlUtils.conv_html(programme['desc'])}</desc>\n")

            # 5. DATE?
            if programme.get("date"):
                out.append(f"\t\t<date>{HtmlUtils.conv_html(programme['date'])}</date>\n")

            # 6. CATEGORY*
            if programme.get("category"):
                out.append(
                    f"\t\t<category{lang}>{HtmlUtils.conv_html(programme['category'])}"
                    "</category>\n"
                )

            out.append("\t</programme>\n")
            self.episode_count += 1


def write_output(data: bytes, output: Optional[Path] = None):
    """Write a finished document to output, or to standard output when None"""
    if output is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return

    output = Path(output)
    if output.parent and not output.parent.exists():
        output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "wb") as f:
        f.write(data)
    logging.info("XMLTV output written to: %s (%d bytes)", output, len(data))
