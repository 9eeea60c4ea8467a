from tvgrab.channels import DEFAULT_SHARE_DIR, ChannelMap


def test_load_mapping_file(ch_share_dir):
    channel_map = ChannelMap.from_share_dir("tv_grab_ch_search", ch_share_dir)

    assert len(channel_map) == 2
    assert channel_map.lookup("SRF 1") == "srf1.ch"
    assert channel_map.lookup("  das   ERSTE ") == "daserste.de"
    assert channel_map.lookup("Unknown") is None


def test_missing_mapping_file_is_empty(tmp_path):
    channel_map = ChannelMap.from_share_dir("tv_grab_ch_search", tmp_path)
    assert len(channel_map) == 0


def test_installed_mapping_file():
    channel_map = ChannelMap.from_share_dir("tv_grab_ch_search")

    assert channel_map.mapping_file == DEFAULT_SHARE_DIR / "tv_grab_ch_search" / "channel_ids"
    assert channel_map.lookup("SRF 1") == "srf1.ch"
    assert channel_map.lookup("TeleZüri") == "telezueri.ch"
