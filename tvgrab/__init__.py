"""
tvgrab - XMLTV grabbers for Czech and Swiss television listings

Command line grabbers that fetch programme schedules from regional
providers and write them as XMLTV documents.
"""

__version__ = "1.0.0"
__license__ = "GPL-3.0"

from .config import ConfigError, ConfigManager, GrabSettings
from .downloader import FetchError, PageDownloader
from .utils import HtmlUtils, TimeUtils
from .xmltv import XmltvGenerator

__all__ = [
    "ConfigError",
    "ConfigManager",
    "GrabSettings",
    "FetchError",
    "PageDownloader",
    "HtmlUtils",
    "TimeUtils",
    "XmltvGenerator",
]
