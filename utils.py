# utils.py
import os
import logging

from thefuzz import fuzz

import config


def path_key(path):
    """
    Returns a comparison key for a filesystem path.

    Paths that point to the same file (different separators, redundant
    components, different case on Windows) produce the same key.
    """
    if not path or not isinstance(path, str):
        return ""
    return os.path.normcase(os.path.normpath(path))


def has_executable_extension(name):
    """True if the file name ends with one of the executable extensions."""
    if not name or not isinstance(name, str):
        return False
    return name.lower().endswith(config.EXECUTABLE_EXTENSIONS)


def _lower_set(names):
    return {n.lower() for n in names}


_SERVER_NAMES_LOWER = _lower_set(config.SERVER_EXECUTABLES)
_CLIENT_NAMES_LOWER = _lower_set(config.CLIENT_EXECUTABLES)


def is_server_executable(file_name):
    """Exact (case-insensitive) match against the known server executable names."""
    if not file_name:
        return False
    return os.path.basename(file_name).lower() in _SERVER_NAMES_LOWER


def is_client_executable(file_name):
    """Exact (case-insensitive) match against the known client executable names."""
    if not file_name:
        return False
    return os.path.basename(file_name).lower() in _CLIENT_NAMES_LOWER


def is_known_executable(file_name):
    return is_server_executable(file_name) or is_client_executable(file_name)


def is_potential_client_name(file_name):
    """Weak match: an executable whose name mentions 'launcher' or 'client'."""
    if not has_executable_extension(file_name):
        return False
    name_lower = os.path.basename(file_name).lower()
    return any(marker in name_lower for marker in config.POTENTIAL_CLIENT_MARKERS)


def contains_domain_keyword(text):
    """True if the text (folder name or full path) contains a domain keyword."""
    if not text or not isinstance(text, str):
        return False
    text_lower = text.lower()
    return any(keyword in text_lower for keyword in config.DOMAIN_KEYWORDS)


def is_recognized_game_dir(folder_name):
    """Exact (case-insensitive) match against the recognized install folder names."""
    if not folder_name:
        return False
    return folder_name.lower() in _lower_set(config.RECOGNIZED_GAME_DIRS)


def fuzzy_matches_game_dir(folder_name, threshold=None):
    """
    Fuzzy comparison of a folder name against the recognized install folder names.

    Catches renamed installs like 'Single-Player-Tarkov (old)' that contain no
    exact keyword hit in a usable position.
    """
    if not folder_name or not isinstance(folder_name, str):
        return False
    if threshold is None:
        threshold = config.FUZZY_FOLDER_MATCH_RATIO
    cleaned = folder_name.replace('_', ' ').replace('-', ' ').lower()
    for known in config.RECOGNIZED_GAME_DIRS:
        known_cleaned = known.replace('_', ' ').replace('-', ' ').lower()
        # Very short names produce noisy partial ratios
        if len(known_cleaned) < 4:
            continue
        # partial_ratio scores any substring 100, so only use it when the folder
        # name is at least as long as the known name
        if len(cleaned) < len(known_cleaned):
            ratio = fuzz.ratio(known_cleaned, cleaned)
        else:
            ratio = fuzz.partial_ratio(known_cleaned, cleaned)
        if ratio >= threshold:
            logging.debug(f"Fuzzy folder match: '{folder_name}' ~ '{known}' ({ratio})")
            return True
    return False


def list_directory(path):
    """
    Lists the entries of a directory as (name, full_path, is_dir, is_file) tuples.

    Missing or unreadable directories return an empty list.
    """
    entries = []
    try:
        with os.scandir(path) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir()
                    is_file = entry.is_file()
                except OSError:
                    continue
                entries.append((entry.name, entry.path, is_dir, is_file))
    except (OSError, TypeError, ValueError) as e:
        logging.debug(f"Cannot list directory '{path}': {e}")
    return entries
