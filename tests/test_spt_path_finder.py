import os
import threading
import time

import learning_store
import settings_manager
import spt_path_finder
from discovery_models import Hit, SourceType


def failing_probe(env):
    raise RuntimeError("disk on fire")


def test_all_probes_failing_degrades_gracefully(tmp_path, make_env):
    probes = [("one", failing_probe), ("two", failing_probe)]
    result = spt_path_finder.detect_paths(env=make_env(), settings={}, probes=probes,
                                          learning_path=str(tmp_path / "learn.json"))

    assert result.server_path == ""
    assert result.client_path == ""
    assert result.confidence == 0
    assert [hit.source_type for hit in result.search_results] == [SourceType.ERROR, SourceType.ERROR]
    assert "disk on fire" in result.search_results[0].error


def test_companion_launcher_is_found_beside_server(tmp_path, make_env, touch):
    install = tmp_path / "C" / "SPT"
    server = touch(install / "SPT.Server.exe")
    launcher = touch(install / "SPT.Launcher.exe")

    def server_only(env):
        return [Hit.for_file(SourceType.COMMON_PATH, server)]

    result = spt_path_finder.detect_paths(env=make_env(), settings={}, probes=[("common", server_only)],
                                          learning_path=str(tmp_path / "learn.json"))

    assert result.server_path == server
    assert result.client_path == launcher
    assert result.client_candidates[0].source_type == SourceType.SERVER_DIR_COMPANION
    assert result.confidence >= 80


def test_companion_wins_duplicate_from_weaker_probe(tmp_path, make_env, touch):
    install = tmp_path / "C" / "SPT"
    server = touch(install / "SPT.Server.exe")
    launcher = touch(install / "SPT.Launcher.exe")

    def both(env):
        return [Hit.for_file(SourceType.COMMON_PATH, server),
                Hit.for_file(SourceType.COMMON_PATH, launcher)]

    result = spt_path_finder.detect_paths(env=make_env(), settings={}, probes=[("common", both)],
                                          learning_path=str(tmp_path / "learn.json"))

    assert len(result.client_candidates) == 1
    assert result.client_candidates[0].source_type == SourceType.SERVER_DIR_COMPANION


def test_learned_path_wins_and_stale_one_is_dropped(tmp_path, make_env, touch):
    learn = str(tmp_path / "learn.json")
    learned = touch(tmp_path / "learned" / "server.exe")
    other = touch(tmp_path / "other" / "SPT.Server.exe")
    learning_store.record_outcome(learned, "", True, learn)
    learning_store.record_outcome(str(tmp_path / "removed" / "server.exe"), "", True, learn)

    def probe(env):
        return [Hit.for_file(SourceType.STEAM, other)]

    result = spt_path_finder.detect_paths(env=make_env(), settings={}, probes=[("steam", probe)],
                                          learning_path=learn)

    assert result.server_path == learned
    assert [c.path for c in result.server_candidates] == [learned, other]


def test_weight_overrides_come_from_settings(tmp_path, make_env, touch):
    a = touch(tmp_path / "a" / "server.exe")
    b = touch(tmp_path / "b" / "server.exe")

    def probe(env):
        return [Hit.for_file(SourceType.COMMON_PATH, a), Hit.for_file(SourceType.USER_DIR, b)]

    settings = {"score_weight_overrides": {"user_dir": 95}}
    result = spt_path_finder.detect_paths(env=make_env(), settings=settings, probes=[("p", probe)],
                                          learning_path=str(tmp_path / "learn.json"))
    assert result.server_path == b


def test_run_probes_keeps_registration_order(make_env):
    def slow(env):
        time.sleep(0.2)
        return [Hit.for_directory(SourceType.REGISTRY, "/slow")]

    def fast(env):
        return [Hit.for_directory(SourceType.COMMON_PATH, "/fast")]

    hits = spt_path_finder.run_probes(make_env(), [("slow", slow), ("fast", fast)])
    assert [hit.file_path for hit in hits] == [os.path.normpath("/slow"), os.path.normpath("/fast")]


def test_run_probes_runs_concurrently(make_env):
    barrier = threading.Barrier(2, timeout=5)

    def waiter(env):
        barrier.wait()
        return []

    # Deadlocks (and fails with BrokenBarrierError) if the probes ran one after another
    hits = spt_path_finder.run_probes(make_env(), [("a", waiter), ("b", waiter)])
    assert all(hit.source_type != SourceType.ERROR for hit in hits)


def test_run_probes_without_probes(make_env):
    assert spt_path_finder.run_probes(make_env(), []) == []


def test_companion_search_runs_once_per_directory(tmp_path, touch):
    server = touch(tmp_path / "install" / "server.exe")
    touch(tmp_path / "install" / "launcher.exe")
    hits = [Hit.for_file(SourceType.COMMON_PATH, server), Hit.for_file(SourceType.DEEP_WALK, server)]
    companions = spt_path_finder.run_companion_searches(hits)
    assert len(companions) == 1


def test_record_launch_outcome(tmp_path):
    learn = str(tmp_path / "learn.json")
    assert spt_path_finder.record_launch_outcome("/x/server.exe", "/x/launcher.exe", False, learn)
    record = learning_store.load_learning_data(learn)
    assert record.failed_attempts[0].client_path == "/x/launcher.exe"


def test_autofill_skips_discovery_when_paths_configured(tmp_path, monkeypatch):
    settings_path = str(tmp_path / "settings.json")
    settings = settings_manager.get_default_settings()
    settings.update(server_path="/x/server.exe", client_path="/x/launcher.exe")
    settings_manager.save_settings(settings, settings_path)

    def boom(**kwargs):
        raise AssertionError("discovery should not run")

    monkeypatch.setattr(spt_path_finder, "detect_paths", boom)
    loaded, result = spt_path_finder.autofill_settings(settings_path)
    assert result is None
    assert loaded["server_path"] == "/x/server.exe"


def test_autofill_only_fills_missing_paths(tmp_path, make_env, touch):
    settings_path = str(tmp_path / "settings.json")
    settings = settings_manager.get_default_settings()
    settings["server_path"] = "/mine/server.exe"
    settings_manager.save_settings(settings, settings_path)

    server = touch(tmp_path / "found" / "server.exe")
    launcher = touch(tmp_path / "found" / "launcher.exe")
    env = make_env(known_locations=[str(tmp_path / "found")])

    loaded, result = spt_path_finder.autofill_settings(settings_path, str(tmp_path / "learn.json"), env=env)

    assert result.server_path == server
    assert loaded["server_path"] == "/mine/server.exe"
    assert loaded["client_path"] == launcher
    saved, first_launch = settings_manager.load_settings(settings_path)
    assert not first_launch
    assert saved["client_path"] == launcher


def test_autofill_force_overwrites(tmp_path, make_env, touch):
    settings_path = str(tmp_path / "settings.json")
    settings = settings_manager.get_default_settings()
    settings.update(server_path="/mine/server.exe", client_path="/mine/launcher.exe")
    settings_manager.save_settings(settings, settings_path)

    server = touch(tmp_path / "found" / "server.exe")
    env = make_env(known_locations=[str(tmp_path / "found")])

    loaded, result = spt_path_finder.autofill_settings(settings_path, str(tmp_path / "learn.json"),
                                                       force=True, env=env)

    assert result is not None
    assert loaded["server_path"] == server
    # nothing found for the client, keep the configured one
    assert loaded["client_path"] == "/mine/launcher.exe"
