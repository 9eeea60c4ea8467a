"""
Shared fixtures: an in-memory downloader for scraped pages and a local
HTTP stub server for end-to-end runs.
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlencode, urlparse

import pytest

from tvgrab.downloader import FetchError, PageDownloader

CH_BASE_URL = "https://tv.example"

CH_INDEX = """<html><body><nav>
<a class="tv-group" data-group="ch" href="/channels?group=ch">Schweiz</a>
<a class="tv-group" data-group="de" href="/channels?group=de">Deutschland</a>
</nav></body></html>"""

CH_GROUP_CH = """<html><body>
<div class="tv-channel" data-channel="sf1">
  <img class="tv-channel-logo" src="/logos/sf1.png"/>
  <span class="tv-channel-name">SRF 1</span>
</div>
<div class="tv-channel" data-channel="tv25">
  <span class="tv-channel-name">Lokal  TV</span>
</div>
</body></html>"""

CH_GROUP_DE = """<html><body>
<div class="tv-channel" data-channel="ard">
  <span class="tv-channel-name">Das Erste</span>
</div>
<div class="tv-channel" data-channel="sf1-de">
  <span class="tv-channel-name">SRF 1</span>
</div>
</body></html>"""

CH_LISTING_CH = """<html><body>
<div class="tv-channel-row" data-channel="sf1">
  <a class="tv-segment" href="/programm/1"><span class="tv-time">20:15</span> Tagesschau</a>
  <a class="tv-segment" href="/programm/2"><span class="tv-time">23:30</span> Der Film</a>
  <a class="tv-segment" href="/programm/3"><span class="tv-time">01:10</span> Nacht</a>
</div>
<div class="tv-channel-row" data-channel="tv25"></div>
</body></html>"""

CH_DETAIL_1 = """<html><body>
<h1 class="tv-title">Tagesschau</h1>
<h2 class="tv-subtitle">Hauptausgabe</h2>
<span class="tv-category">Nachrichten</span>
<p class="tv-time-range">Mo 20:15 - 20:45</p>
<div class="tv-description">Die wichtigsten <b>Nachrichten</b> des Tages &amp; Wetter.</div>
</body></html>"""

CH_DETAIL_2 = """<html><body>
<h1 class="tv-title">Der Film</h1>
<span class="tv-category">Spielfilm</span>
<span class="tv-year">USA 1994</span>
<p class="tv-time-range">23:30 - 01:10</p>
</body></html>"""

CH_DETAIL_3 = """<html><body>
<h1 class="tv-title">Nachtprogramm</h1>
</body></html>"""

CH_MAPPING = """# test mapping
SRF 1;srf1.ch
Das Erste;daserste.de
broken line without separator
"""


def page_key(url, params=None):
    if params:
        return f"{url}?{urlencode(sorted(params.items()))}"
    return url


class FakeDownloader(PageDownloader):
    """PageDownloader serving registered pages without network access"""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.requested = []
        super().__init__(retry_pause=0)

    def add(self, url, content, params=None):
        self.pages[page_key(url, params)] = content

    def fetch(self, url, params=None):
        key = page_key(url, params)
        self.requested.append(key)
        self.total_requests += 1
        if key not in self.pages:
            raise FetchError(f"Cannot fetch {key} after 2 attempts (HTTP 404)")
        content = self.pages[key]
        if isinstance(content, str):
            content = content.encode("utf-8")
        return content


@pytest.fixture
def ch_share_dir(tmp_path):
    share_dir = tmp_path / "share"
    share_dir.mkdir()
    (share_dir / "channel_ids").write_text(CH_MAPPING, encoding="utf-8")
    return share_dir


@pytest.fixture
def ch_downloader():
    """Downloader holding the channel index, group and detail pages"""
    downloader = FakeDownloader()
    downloader.add(f"{CH_BASE_URL}/channels", CH_INDEX)
    downloader.add(f"{CH_BASE_URL}/channels", CH_GROUP_CH, params={"group": "ch"})
    downloader.add(f"{CH_BASE_URL}/channels", CH_GROUP_DE, params={"group": "de"})
    downloader.add(f"{CH_BASE_URL}/programm/1", CH_DETAIL_1)
    downloader.add(f"{CH_BASE_URL}/programm/2", CH_DETAIL_2)
    downloader.add(f"{CH_BASE_URL}/programm/3", CH_DETAIL_3)
    yield downloader
    downloader.close()


class StubHandler(BaseHTTPRequestHandler):
    """Serves server.routes[path] = (status, body) and records requests"""

    def do_GET(self):
        parsed = urlparse(self.path)
        self.server.requests.append((parsed.path, parse_qs(parsed.query)))
        status, body = self.server.routes.get(parsed.path, (404, b"not found"))
        self.send_response(status)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def stub_server():
    """Local HTTP server; set server.routes before requesting"""
    server = ThreadingHTTPServer(("127.0.0.1", 0), StubHandler)
    server.routes = {}
    server.requests = []
    server.url = f"http://127.0.0.1:{server.server_address[1]}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture(autouse=True)
def no_retry_pause(monkeypatch):
    monkeypatch.setattr(PageDownloader, "RETRY_PAUSE", 0)
