# spt_path_finder.py
# -*- coding: utf-8 -*-
"""
Discovery orchestrator: locates the SPT server and client executables.

    result = spt_path_finder.detect_paths()
    result.server_path, result.client_path, result.confidence

Probes run concurrently on a thread pool and are joined before scoring.
After a launch attempt the caller reports back through record_launch_outcome(),
which future runs read through the learning store.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List

import learning_store
import path_probes
import settings_manager
from companion_search import find_companion
from discovery_models import DiscoveryResult, Hit
from path_probes import ProbeEnvironment
from path_ranker import compute_confidence, confidence_tier, rank
from utils import is_server_executable, path_key


def _run_probe(name, probe, env) -> List[Hit]:
    try:
        hits = list(probe(env))
    except Exception as e: # a failing probe must not stop the others
        logging.error(f"Probe '{name}' failed: {e}", exc_info=True)
        return [Hit.for_error(name, e)]
    logging.info(f"Probe '{name}' returned {len(hits)} hit(s).")
    return hits


def run_probes(env, probes=None, max_workers=None) -> List[Hit]:
    """
    Runs every probe concurrently and joins their results.

    The combined list follows the probe registration order, whatever order
    the probes finish in.
    """
    probes = probes if probes is not None else path_probes.PROBES
    if not probes:
        return []
    results = {}
    with ThreadPoolExecutor(max_workers=max_workers or len(probes)) as ex:
        futures = {ex.submit(_run_probe, name, probe, env): index
                   for index, (name, probe) in enumerate(probes)}
        for f in as_completed(futures):
            results[futures[f]] = f.result()

    hits = []
    for index in range(len(probes)):
        hits.extend(results.get(index, []))
    return hits


def run_companion_searches(hits) -> List[Hit]:
    """Companion search once per distinct directory holding a server executable."""
    companion_hits = []
    searched_dirs = set()
    for hit in hits:
        if not hit.is_file or not is_server_executable(hit.file_name):
            continue
        dir_key = path_key(os.path.dirname(hit.file_path))
        if dir_key in searched_dirs:
            continue
        searched_dirs.add(dir_key)
        try:
            companion_hits.extend(find_companion(hit.file_path))
        except Exception as e: # same isolation as the probes
            logging.error(f"Companion search failed for '{hit.file_path}': {e}", exc_info=True)
            companion_hits.append(Hit.for_error("companion_search", e))
    return companion_hits


def detect_paths(env=None, settings=None, learning_path=None, cancellation_manager=None, probes=None) -> DiscoveryResult:
    """
    Runs a full discovery and returns the best server/client paths.

    Never raises: on failure the result has empty paths, confidence 0 and
    diagnostic error hits in search_results.
    """
    hits = []
    try:
        if settings is None:
            settings, _ = settings_manager.load_settings()
        record = learning_store.load_learning_data(learning_path)
        if env is None:
            env = ProbeEnvironment.from_system(settings, cancellation_manager)

        hits = run_probes(env, probes)
        hits.extend(run_companion_searches(hits))

        server_candidates, client_candidates = rank(
            hits, record,
            overrides=settings.get("score_weight_overrides"),
            path_exists=os.path.isfile,
        )
        confidence = compute_confidence(server_candidates, client_candidates)
    except Exception as e: # discovery degrades to "ask the user", never crashes the caller
        logging.error(f"Path discovery failed: {e}", exc_info=True)
        return DiscoveryResult(search_results=hits + [Hit.for_error("discovery", e)])

    result = DiscoveryResult(
        server_path=server_candidates[0].path if server_candidates else "",
        client_path=client_candidates[0].path if client_candidates else "",
        confidence=confidence,
        search_results=hits,
        server_candidates=server_candidates,
        client_candidates=client_candidates,
    )
    logging.info(f"Discovery finished: server='{result.server_path}', client='{result.client_path}', "
                 f"confidence={confidence} ({confidence_tier(confidence)}), {len(hits)} raw hit(s).")
    return result


def record_launch_outcome(server_path, client_path, success, learning_path=None) -> bool:
    """Reports a launch attempt to the learning store. Returns True once persisted."""
    return learning_store.record_outcome(server_path, client_path, success, learning_path)


def autofill_settings(settings_path=None, learning_path=None, force=False, env=None):
    """
    Fills missing server/client paths in the settings from a discovery run.

    Discovery only runs when a path is not configured yet (or force=True).
    Configured paths are never overwritten unless force=True.

    Returns:
        (settings, DiscoveryResult or None if discovery was not needed)
    """
    settings, _first_launch = settings_manager.load_settings(settings_path)
    if not force and settings.get("server_path") and settings.get("client_path"):
        logging.info("Server and client paths already configured, skipping discovery.")
        return settings, None

    result = detect_paths(env=env, settings=settings, learning_path=learning_path)
    changed = False
    for key, found in (("server_path", result.server_path), ("client_path", result.client_path)):
        if found and (force or not settings.get(key)):
            settings[key] = found
            changed = True
    if changed:
        settings_manager.save_settings(settings, settings_path)
    return settings, result
