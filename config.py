# config.py
import os
import logging
import platform


# --- Application name (used for the app data folder) ---
APP_NAME = "SPTPathFinder"

# --- Function to find/create the app data folder ---
def get_app_data_folder():
    """Returns the app data folder path (%LOCALAPPDATA% on Windows)
       and creates it if it does not exist. Handles basic fallbacks."""
    system = platform.system()
    base_path = None
    app_folder = None

    try:
        if system == "Windows":
            base_path = os.getenv('LOCALAPPDATA')
        elif system == "Darwin": # macOS
            base_path = os.path.expanduser('~/Library/Application Support')
        elif system == "Linux":
             # Standard XDG Base Directory Specification
             xdg_data_home = os.getenv('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))
             base_path = xdg_data_home

        if not base_path:
             logging.error("Unable to determine the standard user data folder. Using the current folder as fallback.")
             app_folder = os.path.abspath(APP_NAME)
        else:
             app_folder = os.path.join(base_path, APP_NAME)

        if not os.path.exists(app_folder):
             try:
                 os.makedirs(app_folder, exist_ok=True)
                 logging.info(f"Created application data folder: {app_folder}")
             except OSError as e:
                 # load/save functions handle the error later on
                 logging.error(f"Unable to create data folder {app_folder}: {e}.")

    except Exception as e:
         logging.error(f"Unexpected error in get_app_data_folder: {e}. Falling back to CWD.", exc_info=True)
         app_folder = os.path.abspath(APP_NAME)
         try:
             os.makedirs(app_folder, exist_ok=True)
         except OSError:
             pass

    return app_folder


SETTINGS_FILENAME = "settings.json"
LEARNING_FILENAME = "learning_data.json"

# --- Executable names ---
# Matching is case-insensitive. The two lists must stay disjoint: a file name
# classifies as exactly one role.
SERVER_EXECUTABLES = [
    "SPT.Server.exe",
    "Aki.Server.exe",
    "server.exe",
    "SPT-Server.exe",
    "AkiServer.exe",
]

CLIENT_EXECUTABLES = [
    "SPT.Launcher.exe",
    "SPT-Launcher.exe",
    "Aki.Launcher.exe",
    "launcher.exe",
]

EXECUTABLE_EXTENSIONS = (".exe",)

# Substrings that mark a "potential" client beside a server executable
POTENTIAL_CLIENT_MARKERS = ("launcher", "client")

# --- Domain keywords ---
# A folder or path "belongs to the domain" when it contains one of these (lowercase)
DOMAIN_KEYWORDS = [
    "spt",
    "aki",
    "tarkov",
]

# Folder names of a well-formed install (used for Steam bonus and fuzzy folder matching)
RECOGNIZED_GAME_DIRS = [
    "SPT",
    "SPT-AKI",
    "SPT_AKI",
    "SPTarkov",
    "SPT-Tarkov",
    "Single Player Tarkov",
    "EscapeFromTarkov",
    "Escape From Tarkov",
]

# Install folder names guessed under drive roots, Program Files and user folders.
# Includes versioned guesses left behind by the installer.
INSTALL_FOLDER_NAMES = [
    "SPT-AKI",
    "SPT",
    "SPTarkov",
    "SPT_AKI",
    "Single Player Tarkov",
    "SPT-AKI-3.8",
    "SPT-AKI-3.9",
    "SPT-3.10",
    "SPT-3.11",
]

# User folders scanned by the user-directory probe (relative to home)
USER_SEARCH_FOLDERS = [
    "Desktop",
    "Documents",
    "Downloads",
    "Games",
]

# Historically common install locations, relative to each drive root
KNOWN_LOCATION_SUFFIXES = [
    "SPT",
    "SPT-AKI",
    os.path.join("Games", "SPT"),
    os.path.join("Games", "SPT-AKI"),
    "EFT",
    os.path.join("Games", "EFT"),
    os.path.join("Battlestate Games", "SPT"),
    os.path.join("Program Files", "SPT"),
]

# Drive roots probed on Windows (only existing ones are used)
WINDOWS_DRIVE_LETTERS = ["C", "D", "E", "F", "G"]

# --- Deep walk ---
DEEP_WALK_MAX_DEPTH = 3
DEEP_WALK_MAX_DEPTH_LIMIT = 5

# Folder names never entered by recursive scans
BANNED_FOLDER_NAMES_LOWER = {
    "windows", "system32", "syswow64", "$recycle.bin", "system volume information",
    "programdata", "appdata", "node_modules", ".git", "config.msi", "perflogs",
    "user_data", "bepinex", "cache", "logs",
}

# --- Scoring weights ---
# Empirical tuning knobs. Relative order must hold:
# Learned > ServerDirCompanion > Steam > RecentShortcut > Registry > CommonPath
# > UserDir > DeepWalk > FolderPattern. Sources not listed use DEFAULT_SOURCE_WEIGHT.
SOURCE_WEIGHTS = {
    "learned": 150,
    "server_dir_companion": 140,
    "steam": 120,
    "recent_shortcut": 110,
    "registry": 100,
    "common_path": 80,
    "user_dir": 60,
    "deep_walk": 40,
    "folder_pattern": 20,
}

# Weights for the lower-priority stage of two-stage probes
SECONDARY_SOURCE_WEIGHTS = {
    "deep_walk": 30,
    "folder_pattern": 10,
}

DEFAULT_SOURCE_WEIGHT = 20

# Fixed score for paths seeded from the learning store
LEARNED_SEED_SCORE = 150

# Failed attempts kept in the learning store
MAX_FAILED_ATTEMPTS = 10

# Minimum fuzzy ratio for a folder name to count as a recognized game directory
FUZZY_FOLDER_MATCH_RATIO = 90

# Confidence tiers shown to the user
CONFIDENCE_HIGH_THRESHOLD = 80
CONFIDENCE_MODERATE_THRESHOLD = 50
