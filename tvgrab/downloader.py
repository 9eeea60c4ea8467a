"""
tvgrab.downloader - HTTP download manager

Handles HTTP downloads over a persistent session with a fixed number of
attempts per page. A page that cannot be fetched aborts the whole grab.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import __version__


class FetchError(Exception):
    """Raised when a page cannot be fetched after all attempts"""


class PageDownloader:
    """Download manager with persistent connection and fixed retry count"""

    MAX_ATTEMPTS = 2
    RETRY_PAUSE = 1.0

    def __init__(self, timeout: int = 30, max_attempts: Optional[int] = None,
                 retry_pause: Optional[float] = None):
        self.session: Optional[requests.Session] = None
        self.timeout = timeout
        self.max_attempts = max_attempts or self.MAX_ATTEMPTS
        self.retry_pause = self.RETRY_PAUSE if retry_pause is None else retry_pause
        self.total_requests = 0
        self.failed_attempts = 0
        self.bytes_downloaded = 0

        self.init_session()

    def init_session(self):
        """Initialize session with connection reuse"""
        if self.session:
            self.session.close()

        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": f"tvgrab/{__version__} (+https://xmltv.org)",
                "Accept": "application/json, text/html, application/xml, */*",
                "Accept-Language": "de-CH,de;q=0.9,cs;q=0.8,en;q=0.7",
                "Connection": "keep-alive",
            }
        )

        # Retries are counted by fetch(), never by urllib3
        retry_strategy = Retry(total=0, backoff_factor=0, status_forcelist=[])
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1, max_retries=retry_strategy)

        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        logging.debug("HTTP session initialized (%d attempts per page)", self.max_attempts)

    def fetch(self, url: str, params: Optional[Dict[str, str]] = None) -> bytes:
        """Fetch a page, trying up to max_attempts times, and return the raw body"""
        self.total_requests += 1
        last_error = "no attempt made"

        for attempt in range(self.max_attempts):
            logging.debug("  Attempt %d/%d: %s %s", attempt + 1, self.max_attempts, url,
                          params or "")
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)

                if response.status_code == 200:
                    self.bytes_downloaded += len(response.content)
                    logging.debug("  Success: %d bytes received", len(response.content))
                    return response.content

                last_error = f"HTTP {response.status_code}"
                logging.warning("  HTTP %d received for %s", response.status_code, url)

            except requests.exceptions.Timeout:
                last_error = f"timeout after {self.timeout}s"
                logging.warning("  Timeout (%ds) on attempt %d", self.timeout, attempt + 1)

            except requests.exceptions.ConnectionError as e:
                last_error = f"connection error: {e}"
                logging.warning("  Connection error on attempt %d: %s", attempt + 1, str(e))

            except requests.exceptions.RequestException as e:
                last_error = str(e)
                logging.warning("  Request error on attempt %d: %s", attempt + 1, str(e))

            self.failed_attempts += 1
            if attempt < self.max_attempts - 1:
                time.sleep(self.retry_pause)

        raise FetchError(f"Cannot fetch {url} after {self.max_attempts} attempts ({last_error})")

    def close(self):
        """Clean shutdown"""
        if self.session:
            self.session.close()
            self.session = None

    def get_statistics(self) -> Dict[str, Any]:
        """Get download statistics"""
        return {
            "total_requests": self.total_requests,
            "failed_attempts": self.failed_attempts,
            "bytes_downloaded": self.bytes_downloaded,
        }

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
