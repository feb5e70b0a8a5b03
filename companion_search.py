# companion_search.py
# -*- coding: utf-8 -*-

import logging
import os

from discovery_models import Hit, SourceType
from utils import has_executable_extension, is_client_executable, is_potential_client_name, list_directory


def find_companion(server_hit_path):
    """
    Looks for the client executable next to a confirmed server executable.

    Only the server's own directory is listed, never its subdirectories.
    Exact client names give a normal Hit; other executables whose name
    mentions 'launcher' or 'client' give a Hit flagged potential.
    """
    if not server_hit_path:
        return []
    server_dir = os.path.dirname(os.path.normpath(server_hit_path))
    server_name = os.path.basename(server_hit_path).lower()

    hits = []
    for name, full_path, _is_dir, is_file in list_directory(server_dir):
        if not is_file or not has_executable_extension(name) or name.lower() == server_name:
            continue
        if is_client_executable(name):
            logging.info(f"Companion client found beside server: {full_path}")
            hits.append(Hit.for_file(SourceType.SERVER_DIR_COMPANION, full_path))
        elif is_potential_client_name(name):
            logging.debug(f"Potential companion client beside server: {full_path}")
            hits.append(Hit.for_file(SourceType.SERVER_DIR_COMPANION, full_path, potential=True))
    return hits
