# path_ranker.py
# -*- coding: utf-8 -*-
"""
Turns the raw Hit list of a discovery run into ranked server/client candidates.

Everything here is a pure function of its inputs: the same hits and learning
record always produce the same candidates and confidence.
"""

import logging
import os
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import config
from discovery_models import Candidate, Hit, Role, SourceType
from utils import (
    contains_domain_keyword,
    has_executable_extension,
    is_client_executable,
    is_recognized_game_dir,
    is_server_executable,
    path_key,
)


class ScoreWeight(Enum):
    """Bonuses and penalties applied on top of the source weight."""
    DEPTH_PENALTY = 10              # per level of recursion
    DOMAIN_KEYWORD = 30             # path mentions spt/aki/tarkov
    GAMES_FOLDER = 20               # path mentions "games"
    STEAM_GAME_DIR = 25             # Steam hit inside a recognized game folder
    RESOLVED_SHORTCUT = 15
    LEARNED_PATH = 50
    FAILED_PATH = -30
    POTENTIAL_CLIENT = -20          # fuzzy companion match


def classify_role(file_name) -> Optional[Role]:
    """Role by exact executable name, or None."""
    if is_server_executable(file_name):
        return Role.SERVER
    if is_client_executable(file_name):
        return Role.CLIENT
    return None


def source_weight(hit: Hit, overrides: Optional[Dict[str, int]] = None) -> int:
    key = hit.source_type.value
    if hit.secondary and key in config.SECONDARY_SOURCE_WEIGHTS:
        return config.SECONDARY_SOURCE_WEIGHTS[key]
    if overrides and key in overrides:
        return overrides[key]
    return config.SOURCE_WEIGHTS.get(key, config.DEFAULT_SOURCE_WEIGHT)


def score_hit(hit: Hit, learning_record=None, overrides: Optional[Dict[str, int]] = None) -> int:
    """Score of a file Hit, floored at 0."""
    path = hit.file_path or ""
    path_lower = path.lower()
    score = source_weight(hit, overrides)
    score -= ScoreWeight.DEPTH_PENALTY.value * hit.depth

    if contains_domain_keyword(path):
        score += ScoreWeight.DOMAIN_KEYWORD.value
    if "games" in path_lower:
        score += ScoreWeight.GAMES_FOLDER.value
    if hit.source_type == SourceType.STEAM and is_recognized_game_dir(os.path.basename(os.path.dirname(path))):
        score += ScoreWeight.STEAM_GAME_DIR.value
    if hit.via_shortcut:
        score += ScoreWeight.RESOLVED_SHORTCUT.value
    if learning_record is not None:
        if learning_record.has_successful_path(path):
            score += ScoreWeight.LEARNED_PATH.value
        if learning_record.has_failed_path(path):
            score += ScoreWeight.FAILED_PATH.value
    # An exact name match overrides the potential flag
    if hit.potential and classify_role(hit.file_name) is None:
        score += ScoreWeight.POTENTIAL_CLIENT.value
    return max(0, score)


def _seed_score(path, learning_record) -> int:
    score = config.LEARNED_SEED_SCORE
    if learning_record.has_failed_path(path):
        score += ScoreWeight.FAILED_PATH.value
    return max(0, score)


def rank(hits: List[Hit], learning_record, overrides: Optional[Dict[str, int]] = None,
         path_exists: Optional[Callable[[str], bool]] = None) -> Tuple[List[Candidate], List[Candidate]]:
    """
    Deduplicates, classifies and scores hits.

    Learned paths are seeded first and always win a duplicate. Among other
    hits for the same path the highest source weight wins (earliest on ties);
    the candidate keeps the position where its path first appeared.

    Args:
        hits: raw Hit list of the discovery run
        learning_record: LearningRecord (may be empty)
        overrides: source weight overrides keyed by SourceType value
        path_exists: optional check applied to learned seeds (stale paths are skipped)

    Returns:
        (server_candidates, client_candidates), each sorted by descending score
    """
    # path key -> (Candidate, weight used for dedup, is_seed)
    entries = {}

    for path in learning_record.successful_paths if learning_record is not None else []:
        if not has_executable_extension(path):
            continue
        role = classify_role(os.path.basename(path))
        if role is None:
            continue
        if path_exists is not None and not path_exists(path):
            logging.info(f"Learned path no longer exists, skipping: {path}")
            continue
        key = path_key(path)
        if key in entries:
            continue
        candidate = Candidate(role, path, SourceType.LEARNED, 0, _seed_score(path, learning_record))
        entries[key] = (candidate, config.LEARNED_SEED_SCORE, True)

    for hit in hits:
        if not hit.is_file or not has_executable_extension(hit.file_path):
            continue
        role = classify_role(hit.file_name)
        if role is None and hit.potential:
            role = Role.CLIENT
        if role is None:
            continue

        key = path_key(hit.file_path)
        weight = source_weight(hit, overrides)
        existing = entries.get(key)
        if existing is not None and (existing[2] or existing[1] >= weight):
            continue

        candidate = Candidate(role, hit.file_path, hit.source_type, hit.depth,
                              score_hit(hit, learning_record, overrides))
        # Reassigning an existing key keeps its original position
        entries[key] = (candidate, weight, False)

    server_candidates = [c for c, _w, _s in entries.values() if c.role == Role.SERVER]
    client_candidates = [c for c, _w, _s in entries.values() if c.role == Role.CLIENT]
    # sort() is stable: equal scores keep discovery order
    server_candidates.sort(key=lambda c: -c.score)
    client_candidates.sort(key=lambda c: -c.score)
    return server_candidates, client_candidates


def compute_confidence(server_candidates: List[Candidate], client_candidates: List[Candidate]) -> int:
    """Aggregate 0-100 confidence of a ranking, used only as a UX signal."""
    confidence = 0
    if server_candidates:
        confidence += 30
        if server_candidates[0].score > 80:
            confidence += 20
    if client_candidates:
        confidence += 30
        if client_candidates[0].score > 80:
            confidence += 20
    if server_candidates and client_candidates:
        confidence += 10
    if len(server_candidates) > 1:
        confidence += 5
    if len(client_candidates) > 1:
        confidence += 5
    return max(0, min(100, confidence))


def confidence_tier(confidence: int) -> str:
    if confidence >= config.CONFIDENCE_HIGH_THRESHOLD:
        return "high"
    if confidence >= config.CONFIDENCE_MODERATE_THRESHOLD:
        return "moderate"
    return "low"
