"""
tvgrab.utils - Time and markup utilities

Provides the date range arithmetic shared by all grabbers, the broadcast-day
rollover rule used when a provider only publishes time-of-day values, and the
XMLTV time/escaping helpers.
"""

import html
import re
from datetime import date, datetime, time, timedelta
from typing import List, Optional

import pytz


class TimeUtils:
    """Time and date utilities"""

    # Slots before this hour belong to the next calendar day
    DAY_ROLLOVER_HOUR = 6

    TIME_PATTERN = re.compile(r"(\d{1,2})[:.](\d{2})")

    @staticmethod
    def grab_dates(days: int, offset: int = 0, today: Optional[date] = None) -> List[date]:
        """Return the N consecutive calendar days starting at today+offset"""
        if today is None:
            today = date.today()
        first_day = today + timedelta(days=offset)
        return [first_day + timedelta(days=i) for i in range(days)]

    @staticmethod
    def parse_clock(text: str) -> Optional[time]:
        """Extract the first HH:MM value from a string"""
        if not text:
            return None
        match = TimeUtils.TIME_PATTERN.search(text)
        if not match:
            return None
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            return None
        return time(hour, minute)

    @staticmethod
    def slot_date(processing_day: date, clock: time) -> date:
        """Calendar date of a slot listed on the schedule page of processing_day"""
        if clock.hour < TimeUtils.DAY_ROLLOVER_HOUR:
            return processing_day + timedelta(days=1)
        return processing_day

    @staticmethod
    def localize(day: date, clock: time, tz) -> datetime:
        """Attach a pytz timezone to a naive local date/time"""
        if isinstance(tz, str):
            tz = pytz.timezone(tz)
        return tz.localize(datetime.combine(day, clock))

    @staticmethod
    def stop_after(start: datetime, clock: time) -> datetime:
        """Stop time for clock, rolled to the next day when not after start"""
        tz = start.tzinfo
        naive = datetime.combine(start.date(), clock)
        if naive <= start.replace(tzinfo=None):
            naive += timedelta(days=1)
        # Re-localize so the offset follows DST on the stop date
        if hasattr(tz, "zone"):
            return pytz.timezone(tz.zone).localize(naive)
        return naive.replace(tzinfo=tz)

    @staticmethod
    def conv_time(value: datetime) -> str:
        """Convert a timezone-aware datetime to XMLTV format (YYYYmmddHHMMSS +HHMM)"""
        return value.strftime("%Y%m%d%H%M%S %z")


class HtmlUtils:
    """HTML/XML utilities"""

    @staticmethod
    def conv_html(data) -> str:
        """Convert data to an XML-safe string with entities normalized"""
        if data is None:
            return ""

        data = html.unescape(str(data))

        data = data.replace("&", "&amp;")
        data = data.replace('"', "&quot;")
        data = data.replace("'", "&apos;")
        data = data.replace("<", "&lt;")
        data = data.replace(">", "&gt;")

        return data

    @staticmethod
    def clean_text(data) -> str:
        """Collapse whitespace in scraped text"""
        if data is None:
            return ""
        return " ".join(str(data).split())
