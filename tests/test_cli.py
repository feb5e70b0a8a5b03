import json
import logging

import pytest

import learning_store
import spt_finder_cli
import spt_path_finder
from discovery_models import DiscoveryResult


@pytest.fixture(autouse=True)
def keep_root_logger():
    # main() replaces the root handlers; leave pytest's capture handlers alone afterwards
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_validate_ok(tmp_path, touch, capsys):
    path = touch(tmp_path / "SPT.Server.exe")
    assert spt_finder_cli.main(["validate", path, "--type", "server"]) == 0
    assert "Valid" in capsys.readouterr().out


def test_validate_wrong_type(tmp_path, touch, capsys):
    path = touch(tmp_path / "SPT.Server.exe")
    assert spt_finder_cli.main(["validate", path, "--type", "client"]) == 1
    assert "Invalid client launcher" in capsys.readouterr().out


def test_record_requires_a_path():
    assert spt_finder_cli.main(["record", "success"]) == 2


def test_record_success_goes_to_learning_store():
    assert spt_finder_cli.main(["record", "success", "--server", "/x/server.exe"]) == 0
    assert learning_store.load_learning_data().successful_paths == ["/x/server.exe"]


def test_detect_json(monkeypatch, capsys):
    monkeypatch.setattr(spt_path_finder, "detect_paths",
                        lambda: DiscoveryResult(server_path="/x/server.exe", confidence=50))
    assert spt_finder_cli.main(["detect", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["server_path"] == "/x/server.exe"
    assert "server_candidates" not in data


def test_detect_nothing_found(monkeypatch):
    monkeypatch.setattr(spt_path_finder, "detect_paths", lambda: DiscoveryResult())
    assert spt_finder_cli.main(["detect"]) == 1


def test_missing_command_exits():
    with pytest.raises(SystemExit):
        spt_finder_cli.main([])
