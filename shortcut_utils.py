# shortcut_utils.py
# -*- coding: utf-8 -*-

import os
import logging
import re
import shlex
import shutil
import platform
import xml.etree.ElementTree as ET
from urllib.parse import urlparse, unquote

# Determine the operating system
IS_WINDOWS = platform.system() == 'Windows'
IS_LINUX = platform.system() == 'Linux'

# Import winshell ONLY on Windows
WINSHELL_AVAILABLE = False
if IS_WINDOWS:
    try:
        import winshell
        WINSHELL_AVAILABLE = True
    except ImportError:
        logging.warning("Library 'winshell' or 'pywin32' not found. .lnk shortcuts will not be resolved.")

SHORTCUT_EXTENSIONS = ('.lnk', '.desktop')

# Field codes allowed in a .desktop Exec line (%f, %U, ...)
_DESKTOP_FIELD_CODES = re.compile(r'%[fFuUdDnNkvVmMic]')


def get_recent_items_folder():
    """
    Returns the OS folder holding "recent items" shortcuts, or None.

    Windows keeps one .lnk per recently opened item in %APPDATA%\\Microsoft\\Windows\\Recent.
    Linux has no such folder (see get_recently_used_file).
    """
    if IS_WINDOWS:
        if WINSHELL_AVAILABLE:
            try:
                return winshell.recent()
            except Exception as e: # winshell surfaces pywin32 COM errors as generic exceptions
                logging.debug(f"winshell.recent() failed: {e}")
        appdata = os.getenv('APPDATA')
        if appdata:
            return os.path.join(appdata, 'Microsoft', 'Windows', 'Recent')
    return None


def get_recently_used_file():
    """Path of the freedesktop 'recently-used.xbel' list (Linux), or None."""
    if not IS_LINUX:
        return None
    xdg_data_home = os.getenv('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))
    return os.path.join(xdg_data_home, 'recently-used.xbel')


def _resolve_lnk(link_path):
    if not WINSHELL_AVAILABLE:
        return None
    try:
        shortcut = winshell.shortcut(link_path)
        target_path = shortcut.path
    except Exception as e: # pywin32 raises com_error, not an OSError subclass
        logging.debug(f"Error reading .lnk file '{link_path}': {e}")
        return None
    return os.path.normpath(target_path) if target_path else None


def _resolve_desktop_entry(desktop_path):
    """Resolves the executable of a .desktop file from its Exec= (and Path=) keys."""
    parsed_exec = None
    parsed_path_field = None
    try:
        with open(desktop_path, 'r', encoding='utf-8', errors='ignore') as fdesk:
            for raw_line in fdesk:
                line = raw_line.strip()
                if not line or line.startswith('#'):
                    continue
                if line.startswith('Path=') and parsed_path_field is None:
                    parsed_path_field = line[len('Path='):].strip().strip('"')
                elif line.startswith('Exec=') and parsed_exec is None:
                    parsed_exec = _DESKTOP_FIELD_CODES.sub('', line[len('Exec='):]).strip()
    except OSError as e:
        logging.debug(f"Error reading .desktop file '{desktop_path}': {e}")
        return None

    if not parsed_exec:
        return None
    try:
        parts = shlex.split(parsed_exec)
    except ValueError:
        return None
    if not parts:
        return None

    # Wine launchers: "wine /path/to/SPT.Launcher.exe" -> the .exe is the target
    cand = parts[0]
    for part in parts:
        if part.lower().endswith('.exe'):
            cand = part
            break
    cand = os.path.expandvars(os.path.expanduser(cand))
    if not os.path.isabs(cand) and parsed_path_field:
        base_dir = os.path.expandvars(os.path.expanduser(parsed_path_field))
        cand = os.path.join(base_dir, cand)
    if not os.path.isabs(cand):
        which = shutil.which(cand)
        if which:
            cand = which
    return os.path.normpath(cand) if os.path.isabs(cand) else None


def resolve_shortcut(shortcut_path):
    """
    Returns the target path of a shortcut (.lnk on Windows, .desktop on Linux),
    or None if it cannot be resolved. The target is not checked for existence.
    """
    if not shortcut_path:
        return None
    ext = os.path.splitext(shortcut_path)[1].lower()
    if ext == '.lnk':
        return _resolve_lnk(shortcut_path)
    if ext == '.desktop':
        return _resolve_desktop_entry(shortcut_path)
    return None


def read_recently_used_paths(xbel_path):
    """
    Lists the local file paths recorded in a 'recently-used.xbel' file.
    Missing or malformed files return an empty list.
    """
    paths = []
    if not xbel_path or not os.path.isfile(xbel_path):
        return paths
    try:
        tree = ET.parse(xbel_path)
    except (ET.ParseError, OSError) as e:
        logging.debug(f"Cannot parse '{xbel_path}': {e}")
        return paths
    for bookmark in tree.getroot().iter('bookmark'):
        href = bookmark.get('href', '')
        parsed = urlparse(href)
        if parsed.scheme != 'file':
            continue
        local_path = unquote(parsed.path)
        if local_path:
            paths.append(os.path.normpath(local_path))
    return paths
