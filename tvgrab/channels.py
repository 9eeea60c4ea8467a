"""
tvgrab.channels - Static channel mapping table

Loads the provider-name to XMLTV-id table shipped in the share directory.
One entry per line, "provider name;xmltv id", '#' starts a comment.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

# Installed copy of the share directory
DEFAULT_SHARE_DIR = Path(__file__).resolve().parent / "share"


class ChannelMap:
    """Provider channel name to XMLTV channel id table"""

    def __init__(self, mapping_file: Path):
        self.mapping_file = Path(mapping_file)
        self.table: Dict[str, str] = {}

    @classmethod
    def from_share_dir(cls, grabber_name: str, share_dir: Optional[Path] = None,
                       filename: str = "channel_ids") -> "ChannelMap":
        """Load the mapping file of a grabber from share_dir (or the installed copy)"""
        if share_dir is None:
            share_dir = DEFAULT_SHARE_DIR / grabber_name
        channel_map = cls(Path(share_dir) / filename)
        channel_map.load()
        return channel_map

    def load(self) -> Dict[str, str]:
        if not self.mapping_file.exists():
            logging.warning("Channel mapping file not found: %s", self.mapping_file)
            return self.table

        with open(self.mapping_file, "r", encoding="utf-8") as f:
            for line_number, raw_line in enumerate(f, start=1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if ";" not in line:
                    logging.warning("%s:%d: ignoring malformed mapping line: %s",
                                    self.mapping_file.name, line_number, line)
                    continue
                name, xmltv_id = (part.strip() for part in line.split(";", 1))
                if name and xmltv_id:
                    self.table[self._key(name)] = xmltv_id

        logging.debug("Loaded %d channel mappings from %s", len(self.table), self.mapping_file)
        return self.table

    @staticmethod
    def _key(name: str) -> str:
        return " ".join(name.split()).lower()

    def lookup(self, name: str) -> Optional[str]:
        """XMLTV id for a provider channel name, None if unmapped"""
        return self.table.get(self._key(name))

    def __len__(self):
        return len(self.table)
