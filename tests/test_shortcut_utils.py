import os

import shortcut_utils


def write_desktop(path, *lines):
    path.write_text("[Desktop Entry]\nType=Application\n" + "\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


def test_desktop_entry_prefers_wine_target(tmp_path):
    target = tmp_path / "SPT" / "SPT.Launcher.exe"
    entry = write_desktop(tmp_path / "spt.desktop", f'Exec=env WINEPREFIX=/x wine "{target}" %U')
    assert shortcut_utils.resolve_shortcut(entry) == os.path.normpath(str(target))


def test_desktop_entry_relative_exec_uses_path_key(tmp_path):
    entry = write_desktop(tmp_path / "server.desktop", "Path=/opt/spt", "Exec=wine SPT.Server.exe")
    assert shortcut_utils.resolve_shortcut(entry) == os.path.normpath("/opt/spt/SPT.Server.exe")


def test_desktop_entry_without_exec(tmp_path):
    entry = write_desktop(tmp_path / "broken.desktop", "Name=Nothing")
    assert shortcut_utils.resolve_shortcut(entry) is None


def test_unsupported_extension_and_empty_path(tmp_path):
    other = tmp_path / "notes.txt"
    other.write_text("Exec=/bin/true\n", encoding="utf-8")
    assert shortcut_utils.resolve_shortcut(str(other)) is None
    assert shortcut_utils.resolve_shortcut("") is None


def test_recently_used_paths(tmp_path):
    xbel = tmp_path / "recently-used.xbel"
    xbel.write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<xbel version="1.0">\n'
        '  <bookmark href="file:///games/My%20SPT/SPT.Server.exe"/>\n'
        '  <bookmark href="https://example.com/file.exe"/>\n'
        '  <bookmark/>\n'
        '</xbel>\n',
        encoding="utf-8",
    )
    assert shortcut_utils.read_recently_used_paths(str(xbel)) == [os.path.normpath("/games/My SPT/SPT.Server.exe")]


def test_recently_used_missing_or_malformed(tmp_path):
    assert shortcut_utils.read_recently_used_paths(None) == []
    assert shortcut_utils.read_recently_used_paths(str(tmp_path / "missing.xbel")) == []
    bad = tmp_path / "bad.xbel"
    bad.write_text("<xbel><bookmark", encoding="utf-8")
    assert shortcut_utils.read_recently_used_paths(str(bad)) == []
