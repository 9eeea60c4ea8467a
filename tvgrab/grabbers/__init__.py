"""
tvgrab.grabbers - Provider grabbers
"""

from .base import BaseGrabber
from .ch_search import ScrapeError, SearchChGrabber
from .cz import CzechGrabber

GRABBERS = {
    CzechGrabber.name: CzechGrabber,
    SearchChGrabber.name: SearchChGrabber,
}

__all__ = [
    "BaseGrabber",
    "CzechGrabber",
    "SearchChGrabber",
    "ScrapeError",
    "GRABBERS",
]
