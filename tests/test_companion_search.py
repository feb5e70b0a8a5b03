from companion_search import find_companion
from discovery_models import SourceType


def test_finds_exact_and_potential_clients(tmp_path, touch):
    server = touch(tmp_path / "install" / "SPT.Server.exe")
    launcher = touch(tmp_path / "install" / "SPT.Launcher.exe")
    fuzzy = touch(tmp_path / "install" / "ModClient.exe")
    touch(tmp_path / "install" / "readme.txt")
    touch(tmp_path / "install" / "client_notes.txt")
    touch(tmp_path / "install" / "BepInEx" / "launcher.exe")

    hits = find_companion(server)
    by_path = {hit.file_path: hit for hit in hits}

    assert set(by_path) == {launcher, fuzzy}
    assert all(hit.source_type == SourceType.SERVER_DIR_COMPANION for hit in hits)
    assert by_path[launcher].potential is False
    assert by_path[fuzzy].potential is True


def test_server_itself_and_other_servers_are_not_companions(tmp_path, touch):
    server = touch(tmp_path / "install" / "server.exe")
    touch(tmp_path / "install" / "Aki.Server.exe")
    assert find_companion(server) == []


def test_missing_directory_returns_nothing(tmp_path):
    assert find_companion(str(tmp_path / "nowhere" / "server.exe")) == []
    assert find_companion("") == []
