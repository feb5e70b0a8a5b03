# settings_manager.py
import json
import os
import config # Import for default values
import logging


SETTINGS_FILENAME = config.SETTINGS_FILENAME


def get_settings_file_path() -> str:
    return os.path.join(config.get_app_data_folder(), SETTINGS_FILENAME)


def get_default_settings() -> dict:
    return {
        "server_path": "",
        "client_path": "",
        # Discovery tuning
        "deep_walk_max_depth": config.DEEP_WALK_MAX_DEPTH,
        "extra_search_roots": [], # Additional roots for the deep walk
        "score_weight_overrides": {}, # e.g. {"steam": 125}
    }


def load_settings(file_path=None):
    """Load settings from the settings file.

    Returns (settings, first_launch). Missing keys are filled from the
    defaults; invalid values are replaced by the default and logged.
    """
    settings_file_path = file_path or get_settings_file_path()
    defaults = get_default_settings()

    first_launch = not os.path.exists(settings_file_path)
    if first_launch:
        logging.info(f"Settings file '{settings_file_path}' not found, using defaults.")
        return defaults, True

    try:
        with open(settings_file_path, 'r', encoding='utf-8') as f:
            user_settings = json.load(f)
        if not isinstance(user_settings, dict):
            raise TypeError("settings root is not an object")
        logging.info(f"Settings loaded successfully from '{settings_file_path}'.")
        # User settings override defaults
        settings = defaults.copy()
        settings.update(user_settings)

        # --- Path validation (strings only) ---
        for key in ("server_path", "client_path"):
            if not isinstance(settings.get(key), str):
                logging.warning(f"Invalid {key} value ('{settings.get(key)}'), using default ''.")
                settings[key] = defaults[key]

        # --- Validation deep walk depth ---
        depth = settings.get("deep_walk_max_depth")
        if isinstance(depth, bool) or not isinstance(depth, int) or not 0 <= depth <= config.DEEP_WALK_MAX_DEPTH_LIMIT:
            logging.warning(f"Invalid deep_walk_max_depth value ('{depth}'), using default {defaults['deep_walk_max_depth']}.")
            settings["deep_walk_max_depth"] = defaults["deep_walk_max_depth"]

        # Simple validation type list (ensure it is a list of strings)
        roots = settings.get("extra_search_roots")
        if not isinstance(roots, list) or not all(isinstance(r, str) for r in roots):
            logging.warning("'extra_search_roots' in the settings file is not a valid list, using the default list.")
            settings["extra_search_roots"] = defaults["extra_search_roots"]

        # Weight overrides: only known source types with integer values
        overrides = settings.get("score_weight_overrides")
        if not isinstance(overrides, dict):
            logging.warning("'score_weight_overrides' is not an object, ignoring it.")
            overrides = {}
        valid_overrides = {}
        for key, value in overrides.items():
            if key in config.SOURCE_WEIGHTS and isinstance(value, int) and not isinstance(value, bool):
                valid_overrides[key] = value
            else:
                logging.warning(f"Ignoring invalid score weight override '{key}': {value!r}")
        settings["score_weight_overrides"] = valid_overrides

        return settings, False
    except (json.JSONDecodeError, KeyError, TypeError):
        logging.error(f"Failed to read or validate '{settings_file_path}'...", exc_info=True)
        return defaults, True # Treat as first launch if file is corrupted
    except OSError:
        logging.error(f"Unexpected error reading settings from '{settings_file_path}'.", exc_info=True)
        return defaults, True


def save_settings(settings_dict, file_path=None):
    """Save the settings dictionary. Returns bool (success)."""
    settings_file_path = file_path or get_settings_file_path()
    temp_path = settings_file_path + ".tmp"
    try:
        os.makedirs(os.path.dirname(os.path.abspath(settings_file_path)), exist_ok=True)
        # Write to a temp file first, then replace so a crash never leaves half a file
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
        os.replace(temp_path, settings_file_path)
        logging.info(f"Settings saved to '{settings_file_path}'.")
        return True
    except (OSError, TypeError, ValueError) as e:
        logging.error(f"Error saving settings to '{settings_file_path}': {e}")
        try:
            if os.path.exists(temp_path):
                os.remove(temp_path)
        except OSError:
            pass
        return False
