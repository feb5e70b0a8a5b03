import os

import steam_utils


def make_library(path):
    (path / "steamapps" / "common").mkdir(parents=True)
    return str(path)


def test_parse_library_folders_new_format(tmp_path):
    steam = tmp_path / "Steam"
    (steam / "steamapps").mkdir(parents=True)
    lib = make_library(tmp_path / "SteamLibrary")
    (steam / "steamapps" / "libraryfolders.vdf").write_text(
        '"libraryfolders"\n'
        '{\n'
        f'\t"0"\n\t{{\n\t\t"path"\t\t"{steam}"\n\t}}\n'
        f'\t"1"\n\t{{\n\t\t"path"\t\t"{lib}"\n\t}}\n'
        f'\t"2"\n\t{{\n\t\t"path"\t\t"{tmp_path / "unplugged"}"\n\t}}\n'
        '}\n',
        encoding="utf-8",
    )
    assert steam_utils.parse_library_folders(str(steam)) == [os.path.normpath(str(steam)), os.path.normpath(lib)]


def test_parse_library_folders_old_format(tmp_path):
    steam = tmp_path / "Steam"
    (steam / "config").mkdir(parents=True)
    lib = make_library(tmp_path / "Old")
    (steam / "config" / "libraryfolders.vdf").write_text(
        '"LibraryFolders"\n{\n'
        '\t"TimeNextStatsReport"\t\t"123"\n'
        f'\t"1"\t\t"{lib}"\n'
        '}\n',
        encoding="utf-8",
    )
    assert steam_utils.parse_library_folders(str(steam)) == [os.path.normpath(lib)]


def test_parse_library_folders_without_file(tmp_path):
    assert steam_utils.parse_library_folders(str(tmp_path)) == []


def test_common_folders_only_existing(tmp_path):
    lib = make_library(tmp_path / "Lib")
    empty = tmp_path / "Empty"
    (empty / "steamapps").mkdir(parents=True)
    assert steam_utils.find_steam_common_folders([lib, str(empty)]) == [os.path.join(lib, "steamapps", "common")]


def test_libraries_are_cached(monkeypatch, tmp_path):
    steam = make_library(tmp_path / "Steam")
    calls = []

    def fake_install_path():
        calls.append(1)
        return steam

    monkeypatch.setattr(steam_utils, "get_steam_install_path", fake_install_path)
    assert steam_utils.find_steam_libraries() == [os.path.normpath(steam)]
    assert steam_utils.find_steam_libraries() == [os.path.normpath(steam)]
    assert len(calls) == 1
