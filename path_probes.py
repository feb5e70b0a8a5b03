# path_probes.py
# -*- coding: utf-8 -*-
"""
Source probes for SPT installation discovery.

Each probe inspects one category of location and returns a flat list of Hit
records. Probes take a ProbeEnvironment (roots and resolver callables) so they
can run against a fabricated tree in tests. Missing or unreadable paths are
skipped; a probe never aborts the scan because one location failed.
"""

import glob
import logging
import os
import platform
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import config
import process_utils
import shortcut_utils
import steam_utils
from discovery_models import Hit, SourceType
from utils import (
    contains_domain_keyword,
    fuzzy_matches_game_dir,
    has_executable_extension,
    is_known_executable,
    is_recognized_game_dir,
    list_directory,
    path_key,
)

IS_WINDOWS = platform.system() == 'Windows'


def find_uninstall_locations() -> List[str]:
    """
    InstallLocation of every Windows Uninstall entry whose DisplayName
    contains a domain keyword. Empty on other platforms.
    """
    if not IS_WINDOWS:
        return []
    import winreg

    uninstall_keys = [
        (winreg.HKEY_LOCAL_MACHINE, r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"),
        (winreg.HKEY_LOCAL_MACHINE, r"SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall"),
        (winreg.HKEY_CURRENT_USER, r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"),
    ]
    locations = []
    for hive, subkey in uninstall_keys:
        try:
            key = winreg.OpenKey(hive, subkey)
        except OSError:
            continue
        with key:
            i = 0
            while True:
                try:
                    sub_name = winreg.EnumKey(key, i)
                except OSError:
                    break
                i += 1
                try:
                    with winreg.OpenKey(key, sub_name) as sub_key:
                        name = winreg.QueryValueEx(sub_key, "DisplayName")[0]
                        if not name or not contains_domain_keyword(name):
                            continue
                        install_dir = winreg.QueryValueEx(sub_key, "InstallLocation")[0].strip().strip('"')
                except OSError:
                    continue
                if install_dir and install_dir not in locations:
                    logging.info(f"Registry uninstall entry '{name}' -> {install_dir}")
                    locations.append(install_dir)
    return locations


def _detect_drive_roots(home_dir):
    """Filesystem roots to probe: drive letters on Windows, Wine prefixes and mounts elsewhere."""
    roots = []
    if IS_WINDOWS:
        for letter in config.WINDOWS_DRIVE_LETTERS:
            root = f"{letter}:\\"
            if os.path.isdir(root):
                roots.append(root)
        return roots

    # SPT runs under Wine/Proton on Linux; the prefix's drive_c is its "C:\"
    wine_prefix = os.getenv('WINEPREFIX', os.path.join(home_dir, '.wine'))
    for candidate in [os.path.join(wine_prefix, 'drive_c')] + glob.glob(os.path.join(home_dir, 'Games', '*', 'drive_c')):
        if os.path.isdir(candidate) and candidate not in roots:
            roots.append(candidate)
    user = os.path.basename(home_dir)
    for mount_base in ('/mnt', os.path.join('/media', user), os.path.join('/run/media', user)):
        for mount in sorted(glob.glob(os.path.join(mount_base, '*'))):
            if os.path.isdir(mount):
                roots.append(mount)
    return roots


def _detect_program_files_dirs(drive_roots):
    dirs = []
    if IS_WINDOWS:
        for var in ('PROGRAMFILES', 'PROGRAMFILES(X86)'):
            value = os.getenv(var)
            if value:
                dirs.append(value)
        localappdata = os.getenv('LOCALAPPDATA')
        if localappdata:
            dirs.append(os.path.join(localappdata, 'Programs'))
    else:
        for root in drive_roots:
            if os.path.basename(root) == 'drive_c':
                dirs.append(os.path.join(root, 'Program Files'))
                dirs.append(os.path.join(root, 'Program Files (x86)'))
    return [d for d in dict.fromkeys(dirs) if d]


@dataclass
class ProbeEnvironment:
    """Everything the probes look at. from_system() builds the real one."""
    home_dir: str
    drive_roots: List[str] = field(default_factory=list)
    program_files_dirs: List[str] = field(default_factory=list)
    recent_items_dir: Optional[str] = None
    recently_used_file: Optional[str] = None
    known_locations: List[str] = field(default_factory=list)
    deep_walk_roots: List[str] = field(default_factory=list)
    secondary_walk_roots: List[str] = field(default_factory=list)
    max_depth: int = config.DEEP_WALK_MAX_DEPTH
    steam_path_resolver: Callable[[], Optional[str]] = steam_utils.get_steam_install_path
    steam_common_resolver: Callable[[], List[str]] = steam_utils.find_steam_common_folders
    process_lister: Callable[[], List[str]] = process_utils.list_process_names
    shortcut_resolver: Callable[[str], Optional[str]] = shortcut_utils.resolve_shortcut
    uninstall_locations_resolver: Callable[[], List[str]] = find_uninstall_locations
    cancellation_manager: Optional[object] = None

    @classmethod
    def from_system(cls, settings=None, cancellation_manager=None):
        settings = settings or {}
        home_dir = os.path.expanduser('~')
        drive_roots = _detect_drive_roots(home_dir)
        program_files = _detect_program_files_dirs(drive_roots)

        known_locations = [os.path.join(root, suffix)
                           for root in drive_roots
                           for suffix in config.KNOWN_LOCATION_SUFFIXES]

        deep_walk_roots = [os.path.join(root, 'Games') for root in drive_roots]
        deep_walk_roots += drive_roots + program_files
        deep_walk_roots.append(os.path.join(home_dir, 'Games'))
        deep_walk_roots += list(settings.get("extra_search_roots") or [])

        secondary_walk_roots = [os.path.join(home_dir, folder)
                                for folder in ("Desktop", "Documents", "Downloads")]
        secondary_walk_roots.append(home_dir)

        return cls(
            home_dir=home_dir,
            drive_roots=drive_roots,
            program_files_dirs=program_files,
            recent_items_dir=shortcut_utils.get_recent_items_folder(),
            recently_used_file=shortcut_utils.get_recently_used_file(),
            known_locations=known_locations,
            deep_walk_roots=deep_walk_roots,
            secondary_walk_roots=secondary_walk_roots,
            max_depth=settings.get("deep_walk_max_depth", config.DEEP_WALK_MAX_DEPTH),
            cancellation_manager=cancellation_manager,
        )

    def is_cancelled(self):
        return bool(self.cancellation_manager and self.cancellation_manager.check_cancelled())

    def common_install_dirs(self):
        """Conventional install folders: Program Files variants, drive roots, drive games folders."""
        dirs = []
        for base in self.program_files_dirs:
            dirs += [os.path.join(base, name) for name in config.INSTALL_FOLDER_NAMES]
        for root in self.drive_roots:
            dirs += [os.path.join(root, name) for name in config.INSTALL_FOLDER_NAMES]
            dirs += [os.path.join(root, 'Games', name) for name in config.INSTALL_FOLDER_NAMES]
        return dirs

    def user_install_dirs(self):
        dirs = []
        for folder in config.USER_SEARCH_FOLDERS:
            base = os.path.join(self.home_dir, folder)
            dirs += [os.path.join(base, name) for name in config.INSTALL_FOLDER_NAMES]
        return dirs

    def pattern_roots(self):
        """Filesystem roots whose immediate children are matched by folder name."""
        return list(dict.fromkeys(self.drive_roots + [self.home_dir]))


# --- Helpers ---

def _known_executables_in(directory, source_type, depth=0):
    """File Hits for known server/client executables directly inside a directory."""
    hits = []
    for name, full_path, _is_dir, is_file in list_directory(directory):
        if is_file and is_known_executable(name):
            hits.append(Hit.for_file(source_type, full_path, depth=depth))
    return hits


def _executables_in(directory, source_type, **hit_kwargs):
    """File Hits for every executable directly inside a directory."""
    hits = []
    for name, full_path, _is_dir, is_file in list_directory(directory):
        if is_file and has_executable_extension(name):
            hits.append(Hit.for_file(source_type, full_path, **hit_kwargs))
    return hits


def _scan_install_dirs(directories, source_type):
    """Directory Hit for every existing install folder plus its known executables."""
    hits = []
    seen = set()
    for directory in directories:
        key = path_key(directory)
        if key in seen:
            continue
        seen.add(key)
        try:
            if not os.path.isdir(directory):
                continue
        except (OSError, ValueError):
            continue
        logging.debug(f"[{source_type.value}] Found install folder: {directory}")
        hits.append(Hit.for_directory(source_type, directory))
        hits.extend(_known_executables_in(directory, source_type))
    return hits


# --- Probes ---

def probe_registry(env):
    """Install roots declared by the OS: Steam's registered path and Uninstall entries."""
    hits = []
    steam_path = env.steam_path_resolver()
    if steam_path:
        common = steam_utils.get_common_folder(steam_path)
        if os.path.isdir(common):
            hits.append(Hit.for_directory(SourceType.REGISTRY, common))

    for location in env.uninstall_locations_resolver():
        if not os.path.isdir(location):
            logging.debug(f"Registry install location does not exist: {location}")
            continue
        hits.append(Hit.for_directory(SourceType.REGISTRY, location))
        hits.extend(_known_executables_in(location, SourceType.REGISTRY))
    return hits


def probe_common_paths(env):
    return _scan_install_dirs(env.common_install_dirs(), SourceType.COMMON_PATH)


def probe_user_dirs(env):
    return _scan_install_dirs(env.user_install_dirs(), SourceType.USER_DIR)


def probe_processes(env):
    """Running processes named like a known executable. These Hits carry no path."""
    hits = []
    for name in env.process_lister():
        if is_known_executable(name):
            logging.info(f"Found running SPT process: {name}")
            hits.append(Hit(SourceType.PROCESS, process_name=name))
    return hits


def probe_recent_files(env):
    """Known executables reached through the OS recent-items list."""
    hits = []
    if env.recent_items_dir:
        for name, full_path, _is_dir, is_file in list_directory(env.recent_items_dir):
            if not is_file or not contains_domain_keyword(name):
                continue
            if not name.lower().endswith(shortcut_utils.SHORTCUT_EXTENSIONS):
                continue
            target = env.shortcut_resolver(full_path)
            if not target or not is_known_executable(os.path.basename(target)):
                continue
            if not os.path.isfile(target):
                logging.debug(f"Recent shortcut '{name}' points to a missing file: {target}")
                continue
            hits.append(Hit.for_file(SourceType.RECENT_SHORTCUT, target, via_shortcut=True))

    for recent_path in shortcut_utils.read_recently_used_paths(env.recently_used_file):
        if not contains_domain_keyword(recent_path):
            continue
        if is_known_executable(os.path.basename(recent_path)) and os.path.isfile(recent_path):
            hits.append(Hit.for_file(SourceType.RECENT_SHORTCUT, recent_path))
    return hits


def probe_known_locations(env):
    """Hard-coded historical install paths, plus one level of subdirectory."""
    hits = []
    for location in env.known_locations:
        if not os.path.isdir(location):
            continue
        hits.extend(_known_executables_in(location, SourceType.KNOWN_LOCATION, depth=0))
        for _name, sub_path, is_dir, _is_file in list_directory(location):
            if is_dir:
                hits.extend(_known_executables_in(sub_path, SourceType.KNOWN_LOCATION, depth=1))
    return hits


def probe_folder_patterns(env):
    """
    Children of each filesystem root whose name looks like an SPT folder.

    Keyword matches are full-weight; names that only match fuzzily are
    flagged secondary.
    """
    hits = []
    for root in env.pattern_roots():
        for name, sub_path, is_dir, _is_file in list_directory(root):
            if not is_dir:
                continue
            if contains_domain_keyword(name):
                hits.extend(_executables_in(sub_path, SourceType.FOLDER_PATTERN))
            elif fuzzy_matches_game_dir(name):
                hits.extend(_executables_in(sub_path, SourceType.FOLDER_PATTERN, secondary=True))
    return hits


def probe_steam_library(env):
    """SPT-looking folders inside every Steam library's 'steamapps/common'."""
    hits = []
    for common in env.steam_common_resolver():
        for name, sub_path, is_dir, _is_file in list_directory(common):
            if not is_dir:
                continue
            if contains_domain_keyword(name) or is_recognized_game_dir(name) or fuzzy_matches_game_dir(name):
                logging.debug(f"Steam library folder matches: {sub_path}")
                hits.extend(_executables_in(sub_path, SourceType.STEAM))
    return hits


def _add_walk_hit(hits, found, full_path, depth, secondary):
    """Keeps one hit per file, at the shallowest depth it was reached."""
    key = path_key(full_path)
    index = found.get(key)
    if index is None:
        found[key] = len(hits)
        hits.append(Hit.for_file(SourceType.DEEP_WALK, full_path, depth=depth, secondary=secondary))
    elif depth < hits[index].depth:
        # a primary-root hit stays primary
        secondary = secondary and hits[index].secondary
        hits[index] = Hit.for_file(SourceType.DEEP_WALK, full_path, depth=depth, secondary=secondary)


def _walk(directory, depth, max_depth, visited, found, env, secondary, hits):
    """
    Depth-first walk. Below the first level only keyword folders are entered.

    visited maps each real path to the shallowest depth it was listed at. A
    directory reached again at a shallower depth is walked again.
    """
    if env.is_cancelled():
        return
    try:
        real = os.path.realpath(directory)
    except (OSError, ValueError):
        return
    if real in visited and visited[real] <= depth:
        return
    visited[real] = depth

    subdirs = []
    for name, full_path, is_dir, is_file in list_directory(directory):
        if is_file and is_known_executable(name):
            _add_walk_hit(hits, found, full_path, depth, secondary)
        elif is_dir and name.lower() not in config.BANNED_FOLDER_NAMES_LOWER:
            if depth == 0 or contains_domain_keyword(name):
                subdirs.append(full_path)

    if depth >= max_depth:
        return
    for sub_path in subdirs:
        _walk(sub_path, depth + 1, max_depth, visited, found, env, secondary, hits)


def probe_deep_walk(env):
    """Bounded recursive walk from the primary and then the secondary roots."""
    hits = []
    visited = {}
    found = {}
    max_depth = max(0, min(int(env.max_depth), config.DEEP_WALK_MAX_DEPTH_LIMIT))
    for roots, secondary in ((env.deep_walk_roots, False), (env.secondary_walk_roots, True)):
        for root in roots:
            if env.is_cancelled():
                logging.info("Deep walk cancelled, keeping partial results.")
                return hits
            if root and os.path.isdir(root):
                _walk(root, 0, max_depth, visited, found, env, secondary, hits)
    return hits


# Probe registry in the order results are combined
PROBES = [
    ("registry", probe_registry),
    ("common_paths", probe_common_paths),
    ("user_dirs", probe_user_dirs),
    ("processes", probe_processes),
    ("recent_files", probe_recent_files),
    ("known_locations", probe_known_locations),
    ("folder_patterns", probe_folder_patterns),
    ("steam_library", probe_steam_library),
    ("deep_walk", probe_deep_walk),
]
