import pytest

from courtclient.options import ConnectionType, Options, ServerInfo


@pytest.fixture
def options(tmp_path):
    return Options(tmp_path)


def test_defaults_from_source(options):
    assert options.get("theme") == "default"
    assert options.get("blip_rate") == 2
    assert options.get("default_music") == 50
    assert options.get("log_timestamp_format") == "h:mm:ss AP"
    assert options.get("log_goes_downwards") is True
    assert options.get("log_newline") is False
    assert options.get("mount_paths") == []


def test_unknown_key_raises(options):
    with pytest.raises(KeyError):
        options.get("no_such_setting")
    with pytest.raises(KeyError):
        options.set("no_such_setting", 1)


def test_values_persist_across_instances(tmp_path, options):
    options.set("theme", "midnight")
    options.set("blip_rate", 5)
    options.set("shake", False)
    reloaded = Options(tmp_path)
    assert reloaded.get("theme") == "midnight"
    assert reloaded.get("blip_rate") == 5
    assert reloaded.get("shake") is False


def test_unparsable_int_reads_as_zero(tmp_path):
    (tmp_path / "config.ini").write_text("[General]\nblip_rate=fast\n", encoding="utf-8")
    assert Options(tmp_path).get("blip_rate") == 0


def test_string_with_special_characters_round_trips(tmp_path, options):
    value = ' a, "quoted"\nline @ end '
    options.set("default_showname", value)
    assert Options(tmp_path).get("default_showname") == value


def test_sub_theme_rules(options):
    assert options.sub_theme() == "server"
    options.server_sub_theme = "night"
    assert options.sub_theme() == "night"
    options.set("subtheme", "custom")
    assert options.sub_theme() == "custom"


def test_callwords_round_trip(tmp_path, options):
    words = ["objection", "hold, it", " spaced "]
    options.set_callwords(words)
    assert Options(tmp_path).callwords() == words


def test_empty_callwords(options):
    options.set_callwords([])
    assert options.callwords() == []
    options.set_callwords([""])
    assert options.callwords() == []


def test_mount_paths_round_trip(options):
    options.set("mount_paths", ["/one", "/two"])
    assert options.mount_paths() == ["/one", "/two"]


def test_migrates_callwords_file(tmp_path):
    source = tmp_path / "callwords.ini"
    source.write_text("alpha\nbeta gamma\n", encoding="utf-8")
    opts = Options(tmp_path)
    assert opts.callwords() == ["alpha", "beta gamma"]
    assert not source.exists()


def test_migrates_ooc_name(tmp_path):
    (tmp_path / "config.ini").write_text("[General]\nooc_name=Phoenix\n", encoding="utf-8")
    opts = Options(tmp_path)
    assert opts.get("default_username") == "Phoenix"
    assert "ooc_name" not in (tmp_path / "config.ini").read_text(encoding="utf-8")


def test_ooc_name_does_not_override_username(tmp_path):
    (tmp_path / "config.ini").write_text(
        "[General]\nooc_name=Phoenix\ndefault_username=Miles\n", encoding="utf-8"
    )
    assert Options(tmp_path).get("default_username") == "Miles"


def test_removes_obsolete_keys(tmp_path):
    (tmp_path / "config.ini").write_text(
        "[General]\nshow_custom_shownames=false\ncasing_enabled=true\n"
        "casing_judge_enabled=true\ntheme=kept\n",
        encoding="utf-8",
    )
    opts = Options(tmp_path)
    text = (tmp_path / "config.ini").read_text(encoding="utf-8")
    assert opts.get("show_custom_shownames") is True
    assert "casing" not in text
    assert opts.get("theme") == "kept"


def test_clear_config_restores_defaults(options):
    options.set("theme", "midnight")
    options.clear_config()
    assert options.get("theme") == "default"


def test_favorites_start_empty(options):
    assert options.favorites() == []


def test_add_and_read_favorites(tmp_path, options):
    first = ServerInfo("10.0.0.1", 27016, "First", "line one\nline, two")
    second = ServerInfo("10.0.0.2", 50001, "Second", "", ConnectionType.WEBSOCKETS)
    options.add_favorite(first)
    options.add_favorite(second)
    assert Options(tmp_path).favorites() == [first, second]


def test_remove_favorite(options):
    first = ServerInfo("10.0.0.1", 1, "First")
    second = ServerInfo("10.0.0.2", 2, "Second")
    options.set_favorites([first, second])
    options.remove_favorite(0)
    assert options.favorites() == [second]


def test_remove_favorite_out_of_range(options):
    options.set_favorites([ServerInfo("10.0.0.1", 1, "Only")])
    with pytest.raises(IndexError):
        options.remove_favorite(1)
    with pytest.raises(IndexError):
        options.remove_favorite(-1)


def test_update_favorite(options):
    options.set_favorites([ServerInfo("10.0.0.1", 1, "Old")])
    replacement = ServerInfo("10.0.0.9", 9, "New", "desc", ConnectionType.WEBSOCKETS)
    options.update_favorite(replacement, 0)
    assert options.favorites() == [replacement]


def test_favorite_defaults_for_missing_keys(tmp_path):
    (tmp_path / "favorite_servers.ini").write_text("[0]\n", encoding="utf-8")
    assert Options(tmp_path).favorites() == [
        ServerInfo("127.0.0.1", 27016, "Missing Name", "No description", ConnectionType.TCP)
    ]


def test_favorites_skip_bad_groups_and_sort_numerically(tmp_path):
    (tmp_path / "favorite_servers.ini").write_text(
        "[abc]\nname=bad\n[-1]\nname=negative\n[10]\nname=ten\n[2]\nname=two\n",
        encoding="utf-8",
    )
    names = [server.name for server in Options(tmp_path).favorites()]
    assert names == ["two", "ten"]


def test_unknown_protocol_is_tcp(tmp_path):
    (tmp_path / "favorite_servers.ini").write_text(
        "[0]\nprotocol=carrier-pigeon\n", encoding="utf-8"
    )
    assert Options(tmp_path).favorites()[0].socket_type is ConnectionType.TCP


def test_ui_asset_from_theme(tmp_path, options):
    asset = tmp_path / "res" / "base" / "themes" / "default" / "lobby.ui"
    asset.parent.mkdir(parents=True)
    asset.write_text("<ui/>", encoding="utf-8")
    assert options.get_ui_asset("lobby.ui", tmp_path / "res") == asset


def test_ui_asset_prefers_subtheme(tmp_path, options):
    theme_dir = tmp_path / "res" / "base" / "themes" / "default"
    (theme_dir / "custom").mkdir(parents=True)
    (theme_dir / "lobby.ui").write_text("<ui/>", encoding="utf-8")
    (theme_dir / "custom" / "lobby.ui").write_text("<ui/>", encoding="utf-8")
    options.set("subtheme", "custom")
    assert options.get_ui_asset("lobby.ui", tmp_path / "res") == theme_dir / "custom" / "lobby.ui"


def test_ui_asset_falls_back_to_bundled(tmp_path, options):
    result = options.get_ui_asset("lobby.ui", tmp_path / "res")
    assert result == tmp_path / "res" / "resource" / "ui" / "lobby.ui"