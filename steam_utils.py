# steam_utils.py
# -*- coding: utf-8 -*-
"""
Steam detection utilities.

This module provides functions to:
- Find the Steam installation path across Windows, Linux, and macOS
- Parse VDF (Valve Data Format) configuration files
- Discover Steam library folders
- List the 'steamapps/common' game folders of every library
"""

import logging
import os
import platform

import vdf

# --- Cache Variables ---
# These cache the results of expensive operations to avoid repeated filesystem scans

_steam_install_path = None
_steam_libraries = None


def clear_steam_cache():
    """
    Clear all cached Steam data.

    Call this function when the Steam installation may have changed,
    or when you need to force a rescan of Steam data.
    """
    global _steam_install_path, _steam_libraries

    _steam_install_path = None
    _steam_libraries = None

    logging.info("Steam cache cleared.")


def _parse_vdf(file_path: str) -> dict:
    """
    Parse a Valve Data Format (VDF) file.

    Args:
        file_path: Path to the VDF file

    Returns:
        Parsed dictionary, or None if parsing fails
    """
    if not os.path.isfile(file_path):
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
        # Remove C-style comments if present
        content = '\n'.join(line for line in content.splitlines() if not line.strip().startswith('//'))
        return vdf.loads(content, mapper=dict)
    except FileNotFoundError:
        return None
    except UnicodeDecodeError:
        logging.warning(f"Encoding error reading VDF '{os.path.basename(file_path)}'. Trying fallback encoding...")
        try:
            with open(file_path, 'r', encoding='latin-1') as f:
                content = f.read()
            content = '\n'.join(line for line in content.splitlines() if not line.strip().startswith('//'))
            return vdf.loads(content, mapper=dict)
        except (OSError, SyntaxError, ValueError) as e_fallback:
            logging.error(f"ERROR parsing VDF '{os.path.basename(file_path)}' (fallback failed): {e_fallback}")
            return None
    except (OSError, SyntaxError, ValueError) as e:
        logging.error(f"ERROR parsing VDF '{os.path.basename(file_path)}': {e}")
        return None


def get_steam_install_path() -> str:
    """
    Find the Steam installation path.

    Searches for Steam installation in:
    - Windows: Registry (HKCU and HKLM)
    - Linux: Common installation paths (~/.local/share/Steam, ~/.steam/steam, Flatpak)
    - macOS: ~/Library/Application Support/Steam

    Results are cached for performance.

    Returns:
        Steam installation path as string, or None if not found
    """
    global _steam_install_path

    if _steam_install_path is not None:
        return _steam_install_path

    current_os = platform.system()
    found_path = None

    if current_os == "Windows":
        found_path = _find_steam_windows()
    elif current_os == "Linux":
        found_path = _find_steam_linux()
    elif current_os == "Darwin":
        found_path = _find_steam_macos()
    else:
        logging.info(f"Steam path detection for OS '{current_os}' is not specifically implemented.")

    if found_path:
        _steam_install_path = found_path
        return _steam_install_path

    logging.info("Steam installation path could not be determined.")
    return None


def _find_steam_windows() -> str:
    """Find Steam installation on Windows via registry."""
    try:
        import winreg
    except ImportError:
        logging.info("winreg module not available (normal for non-Windows).")
        return None

    key_path = r"Software\Valve\Steam"
    potential_hives = [
        (winreg.HKEY_CURRENT_USER, "HKCU", "SteamPath"),
        (winreg.HKEY_LOCAL_MACHINE, "HKLM", "InstallPath"),
    ]

    for hive, hive_name, value_name in potential_hives:
        try:
            with winreg.OpenKey(hive, key_path) as hkey:
                path_value, _ = winreg.QueryValueEx(hkey, value_name)

            norm_path = os.path.normpath(path_value.replace('/', '\\'))
            if os.path.isdir(norm_path):
                logging.info(f"Found Steam installation ({hive_name}) via registry: {norm_path}")
                return norm_path
        except OSError:
            logging.debug(f"{value_name} not found in registry hive: {hive_name}\\{key_path}")
            continue

    logging.info("Steam installation not found in Windows registry.")
    return None


def _find_steam_linux() -> str:
    """Find Steam installation on Linux."""
    logging.debug("Attempting to find Steam on Linux...")

    common_linux_paths = [
        os.path.expanduser("~/.local/share/Steam"),
        os.path.expanduser("~/.steam/steam"),
        os.path.expanduser("~/.steam/root"),
        os.path.expanduser("~/.var/app/com.valvesoftware.Steam/data/Steam")  # Flatpak
    ]

    for path_to_check in common_linux_paths:
        if not os.path.isdir(path_to_check):
            logging.debug(f"Path does not exist or is not a directory: {path_to_check}")
            continue

        # Check for Steam installation indicators
        has_steam_sh = os.path.exists(os.path.join(path_to_check, "steam.sh"))
        has_steamapps = os.path.isdir(os.path.join(path_to_check, "steamapps"))
        has_libraryfolders_vdf = os.path.exists(os.path.join(path_to_check, "steamapps", "libraryfolders.vdf"))

        if has_steamapps or has_libraryfolders_vdf or has_steam_sh:
            found_path = os.path.normpath(path_to_check)
            logging.info(f"Found Steam installation on Linux at: {found_path} "
                        f"(Indicators: sh:{has_steam_sh}, apps:{has_steamapps}, lib_vdf:{has_libraryfolders_vdf})")
            return found_path
        else:
            logging.debug(f"No clear Steam indicators found in {path_to_check}")

    logging.info("Steam installation not found in common Linux paths.")
    return None


def _find_steam_macos() -> str:
    """Find Steam installation on macOS."""
    path_to_check = os.path.expanduser("~/Library/Application Support/Steam")
    if os.path.isdir(os.path.join(path_to_check, "steamapps")):
        found_path = os.path.normpath(path_to_check)
        logging.info(f"Found Steam installation on macOS at: {found_path}")
        return found_path

    logging.info("Steam installation not found in common macOS paths.")
    return None


def parse_library_folders(steam_path: str) -> list:
    """
    Read the library paths declared in libraryfolders.vdf.

    Newer clients keep the file in 'steamapps', older ones in 'config'.
    Only libraries that have a 'steamapps' folder are returned.
    """
    libs = []
    for vdf_path in (os.path.join(steam_path, 'steamapps', 'libraryfolders.vdf'),
                     os.path.join(steam_path, 'config', 'libraryfolders.vdf')):
        data = _parse_vdf(vdf_path)
        if not data:
            continue
        logging.debug(f"Reading libraries from: {vdf_path}")
        lib_folders_data = data.get('libraryfolders', data.get('LibraryFolders', data))
        if not isinstance(lib_folders_data, dict):
            continue
        for key, value in lib_folders_data.items():
            if isinstance(value, dict):
                lib_path_raw = value.get('path')
            elif key.isdigit() and isinstance(value, str):
                # Old format: "1" "D:\\SteamLibrary"
                lib_path_raw = value
            else:
                continue
            if not lib_path_raw:
                continue
            lib_path = os.path.normpath(lib_path_raw.replace('\\\\', '\\'))
            if os.path.isdir(os.path.join(lib_path, 'steamapps')) and lib_path not in libs:
                libs.append(lib_path)
    return libs


def find_steam_libraries() -> list:
    """
    Find all Steam library folders.

    Reads libraryfolders.vdf to discover additional library locations
    beyond the main Steam installation directory.

    Results are cached for performance.

    Returns:
        List of Steam library paths
    """
    global _steam_libraries

    if _steam_libraries is not None:
        return _steam_libraries

    steam_path = get_steam_install_path()
    libs = []

    if not steam_path:
        _steam_libraries = []
        return libs

    # Main library (where Steam is installed)
    if os.path.isdir(os.path.join(steam_path, 'steamapps')):
        libs.append(os.path.normpath(steam_path))

    vdf_libs = parse_library_folders(steam_path)
    libs.extend(vdf_libs)

    _steam_libraries = list(dict.fromkeys(libs))  # Remove duplicates
    logging.info(f"Found {len(_steam_libraries)} total Steam libraries ({len(vdf_libs)} from VDF).")
    return _steam_libraries


def get_common_folder(library_path: str) -> str:
    """Returns '<library>/steamapps/common'."""
    return os.path.join(library_path, 'steamapps', 'common')


def find_steam_common_folders(libraries=None) -> list:
    """Existing 'steamapps/common' folders of the given (or detected) libraries."""
    if libraries is None:
        libraries = find_steam_libraries()
    folders = []
    for lib_path in libraries:
        common = get_common_folder(lib_path)
        if os.path.isdir(common):
            folders.append(common)
    return folders
