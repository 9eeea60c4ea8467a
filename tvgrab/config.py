"""
tvgrab.config - Configuration management

Handles the flat per-user configuration file written by --configure:

    # comment
    channel <ID>        selected channel
    #channel <ID>       known but disabled channel
    map <SRC> <DST>     write channel id SRC as DST

and the GrabSettings value that carries the resolved options of one run.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple


class ConfigError(Exception):
    """Raised for a missing or invalid configuration"""


@dataclass
class GrabSettings:
    """Resolved options for a single grabber run"""

    days: int
    offset: int = 0
    output: Optional[Path] = None
    channels: List[str] = field(default_factory=list)
    maps: Dict[str, str] = field(default_factory=dict)
    share_dir: Optional[Path] = None

    def output_id(self, channel_id: str) -> str:
        """Channel id as written to the XMLTV output"""
        return self.maps.get(channel_id, channel_id)


class ConfigManager:
    """Manages a grabber configuration file"""

    DISABLED_CHANNEL_PATTERN = re.compile(r"^#channel\s+(\S+)")

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)
        # channel id -> enabled, in file order
        self.channels: Dict[str, bool] = {}
        self.maps: Dict[str, str] = {}

    def exists(self) -> bool:
        return self.config_file.exists()

    def load_config(self) -> Dict[str, object]:
        """Load and validate configuration file"""
        if not self.config_file.exists():
            raise ConfigError(
                f"Configuration file {self.config_file} not found, "
                "please run the grabber with --configure"
            )

        self.channels = {}
        self.maps = {}

        logging.info("Reading configuration from: %s", self.config_file)
        with open(self.config_file, "r", encoding="utf-8") as f:
            for line_number, raw_line in enumerate(f, start=1):
                self._parse_line(raw_line.strip(), line_number)

        return {
            "channels": self.get_channel_list(),
            "disabled": self.get_disabled_channels(),
            "maps": dict(self.maps),
        }

    def _parse_line(self, line: str, line_number: int):
        """Parse one configuration directive"""
        if not line:
            return

        if line.startswith("#"):
            match = self.DISABLED_CHANNEL_PATTERN.match(line)
            if match:
                self.channels.setdefault(match.group(1), False)
            return

        parts = line.split()
        directive = parts[0].lower()

        if directive == "channel":
            if len(parts) < 2:
                raise ConfigError(f"{self.config_file}:{line_number}: channel without id")
            # Anything after the id is a human readable channel name
            self.channels[parts[1]] = True

        elif directive == "map":
            if len(parts) != 3:
                raise ConfigError(
                    f"{self.config_file}:{line_number}: expected 'map SRC DST', got '{line}'"
                )
            self.maps[parts[1]] = parts[2]

        else:
            raise ConfigError(
                f"{self.config_file}:{line_number}: unknown directive '{parts[0]}'"
            )

    def write_config(
        self,
        channels: Iterable[Tuple[str, str, bool]],
        maps: Optional[Dict[str, str]] = None,
        grabber_name: str = "",
    ):
        """Write the configuration file from (id, name, enabled) tuples"""
        if maps is None:
            maps = self.maps

        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        self.channels = {}
        with open(self.config_file, "w", encoding="utf-8") as f:
            f.write(f"# {grabber_name} configuration, written "
                    f"{datetime.now().strftime('%Y-%m-%d %H:%M')}\n")
            f.write("# Remove the leading '#' to enable a channel.\n")
            for channel_id, name, enabled in channels:
                prefix = "" if enabled else "#"
                # Names must stay on one line
                name = " ".join(str(name or "").split())
                suffix = f" {name}" if name else ""
                f.write(f"{prefix}channel {channel_id}{suffix}\n")
                self.channels[channel_id] = enabled

            if maps:
                f.write("\n# Channel id remapping: map <SRC> <DST>\n")
                for source, target in maps.items():
                    f.write(f"map {source} {target}\n")

        self.maps = dict(maps)
        logging.info("Configuration written to: %s", self.config_file)

    def get_channel_list(self) -> List[str]:
        """Get enabled channel ids in file order"""
        return [channel_id for channel_id, enabled in self.channels.items() if enabled]

    def get_disabled_channels(self) -> List[str]:
        return [channel_id for channel_id, enabled in self.channels.items() if not enabled]

    def is_enabled(self, channel_id: str) -> Optional[bool]:
        """Previous answer for channel_id, None when the channel is new"""
        return self.channels.get(channel_id)

    def log_config_summary(self):
        """Log configuration summary"""
        logging.info("Configuration summary:")
        logging.info("  Channels: %d enabled, %d disabled",
                     len(self.get_channel_list()), len(self.get_disabled_channels()))
        if self.maps:
            logging.info("  Channel id maps: %d", len(self.maps))
            for source, target in self.maps.items():
                logging.debug("    %s -> %s", source, target)
