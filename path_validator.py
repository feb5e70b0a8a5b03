# path_validator.py
# -*- coding: utf-8 -*-

import logging
import os

import config
from utils import is_client_executable, is_server_executable


def validate_path(file_path, kind=None):
    """
    Checks a user-selected executable.

    Args:
        file_path: path to check
        kind: "server", "client" or None (existence check only)

    Returns:
        (valid, error) - error is None when valid
    """
    if not file_path or not os.path.exists(file_path):
        return False, "File does not exist"
    if not os.path.isfile(file_path):
        return False, "Selected path is not a file"

    file_name = os.path.basename(file_path)
    if kind == "server":
        if is_server_executable(file_name):
            return True, None
        return False, f"Invalid server executable. Expected one of: {', '.join(config.SERVER_EXECUTABLES)}"
    if kind == "client":
        if is_client_executable(file_name):
            return True, None
        return False, f"Invalid client launcher. Expected one of: {', '.join(config.CLIENT_EXECUTABLES)}"
    if kind is not None:
        logging.warning(f"Unknown path kind '{kind}', only existence was checked.")
    return True, None
