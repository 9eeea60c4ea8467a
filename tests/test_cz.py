import json
import logging
from datetime import date, timedelta

import pytest

from conftest import FakeDownloader
from tvgrab.args import ArgumentParser
from tvgrab.config import ConfigError, ConfigManager, GrabSettings
from tvgrab.downloader import FetchError
from tvgrab.grabbers import CzechGrabber

BASE_URL = "https://cz.example/api"

CHANNELS_JSON = json.dumps(
    [
        {"id": "ct1.ceskatelevize.cz", "name": "ČT1", "icon": "https://cz.example/ct1.png"},
        {"id": "nova.cz", "name": "Nova"},
        {"name": "no id"},
    ]
)


@pytest.fixture
def grabber():
    downloader = FakeDownloader()
    downloader.add(f"{BASE_URL}/channels.json", CHANNELS_JSON)
    grabber = CzechGrabber(downloader=downloader, base_url=BASE_URL + "/")
    yield grabber
    grabber.close()


def test_fetch_channels(grabber):
    channels = grabber.fetch_channels()
    assert [channel["id"] for channel in channels] == ["ct1.ceskatelevize.cz", "nova.cz"]
    assert channels[0]["name"] == "ČT1"
    assert channels[1]["icon"] is None


def test_fetch_channels_accepts_wrapped_list(grabber):
    grabber.downloader.add(f"{BASE_URL}/channels.json",
                           json.dumps({"channels": [{"id": "prima.cz", "name": "Prima"}]}))
    assert [channel["id"] for channel in grabber.fetch_channels()] == ["prima.cz"]


def test_invalid_channel_json_is_a_fetch_error(grabber):
    grabber.downloader.add(f"{BASE_URL}/channels.json", "<html>maintenance</html>")
    with pytest.raises(FetchError, match="Invalid channel list"):
        grabber.fetch_channels()


def test_list_channels_has_no_programmes(grabber):
    document = grabber.list_channels().decode("utf-8")
    assert document.count("<channel ") == 2
    assert "<programme" not in document
    assert '<display-name lang="cs">ČT1</display-name>' in document


@pytest.mark.parametrize("days,offset", [(1, 0), (5, 0), (3, 4)])
def test_build_query_covers_requested_days(grabber, days, offset):
    settings = GrabSettings(days=days, offset=offset, channels=["a.cz", "b.cz"])
    params = grabber.build_query(settings)

    first = date.fromisoformat(params["from"])
    last = date.fromisoformat(params["to"])
    assert first == date.today() + timedelta(days=offset)
    assert (last - first).days + 1 == days
    assert params["channels"] == "a.cz,b.cz"
    assert params["charset"] == "utf-8"


def test_grab_returns_payload_unchanged(grabber):
    settings = GrabSettings(days=1, channels=["nova.cz"])
    payload = b'<?xml version="1.0" encoding="utf-8"?>\n<tv><channel id="nova.cz"/></tv>\n'
    grabber.downloader.add(f"{BASE_URL}/listings.xml", payload,
                           params=grabber.build_query(settings))

    assert grabber.grab(settings) == payload


def test_grab_without_channels(grabber):
    with pytest.raises(ConfigError):
        grabber.grab(GrabSettings(days=1))


def test_channel_names_are_single_line(grabber):
    grabber.downloader.add(f"{BASE_URL}/channels.json",
                           json.dumps([{"id": "nova.cz", "name": "Nova\nCinema "}]))
    assert grabber.fetch_channels()[0]["name"] == "Nova Cinema"


def test_configure_round_trip_with_multiline_name(grabber, tmp_path):
    grabber.downloader.add(f"{BASE_URL}/channels.json",
                           json.dumps([{"id": "nova.cz", "name": "Nova\nCinema"}]))
    config_manager = ConfigManager(tmp_path / "tv_grab_cz.conf")

    class YesAsker:
        def say(self, message):
            pass

        def ask_many_boolean(self, questions):
            return [True for _ in questions]

    assert grabber.configure(config_manager, YesAsker()) == 1
    args = ArgumentParser(CzechGrabber).parse_args([])
    settings = grabber.resolve_settings(args, ConfigManager(config_manager.config_file))
    assert settings.channels == ["nova.cz"]


def test_map_lines_are_ignored_with_warning(grabber, tmp_path, caplog):
    config_file = tmp_path / "tv_grab_cz.conf"
    config_file.write_text("channel nova.cz\nmap nova.cz nova.local\n", encoding="utf-8")
    args = ArgumentParser(CzechGrabber).parse_args(["--days", "1"])

    with caplog.at_level(logging.WARNING):
        settings = grabber.resolve_settings(args, ConfigManager(config_file))
    assert "1 map directive(s) ignored" in caplog.text

    payload = b"<tv/>\n"
    grabber.downloader.add(f"{BASE_URL}/listings.xml", payload,
                           params=grabber.build_query(settings))
    assert grabber.grab(settings) == payload


def test_command_line_channels_skip_config(grabber, tmp_path):
    args = ArgumentParser(CzechGrabber).parse_args(["--channel", "nova.cz", "--days", "2"])
    settings = grabber.resolve_settings(args, ConfigManager(tmp_path / "missing.conf"))
    assert settings.channels == ["nova.cz"]
    assert settings.days == 2
