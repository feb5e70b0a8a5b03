import pytest

import config
import steam_utils
from path_probes import ProbeEnvironment


@pytest.fixture(autouse=True)
def isolated_app_data(tmp_path, monkeypatch):
    """Keep settings and learning data out of the real user folder."""
    app_dir = tmp_path / "appdata"
    app_dir.mkdir()
    monkeypatch.setattr(config, "get_app_data_folder", lambda: str(app_dir))
    steam_utils.clear_steam_cache()
    yield app_dir
    steam_utils.clear_steam_cache()


@pytest.fixture
def make_env(tmp_path):
    """ProbeEnvironment with every root empty and every resolver stubbed out."""
    home = tmp_path / "home"
    home.mkdir(exist_ok=True)

    def _make(**overrides):
        values = dict(
            home_dir=str(home),
            drive_roots=[],
            program_files_dirs=[],
            recent_items_dir=None,
            recently_used_file=None,
            known_locations=[],
            deep_walk_roots=[],
            secondary_walk_roots=[],
            steam_path_resolver=lambda: None,
            steam_common_resolver=lambda: [],
            process_lister=lambda: [],
            shortcut_resolver=lambda path: None,
            uninstall_locations_resolver=lambda: [],
        )
        values.update(overrides)
        return ProbeEnvironment(**values)

    return _make


@pytest.fixture
def touch():
    """Factory creating an empty file (and its parents); returns the path as str."""
    def _touch(path):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")
        return str(path)
    return _touch
