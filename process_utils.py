# process_utils.py
# -*- coding: utf-8 -*-

import logging

import psutil

from utils import is_server_executable


def list_process_names():
    """Names of the currently running processes (duplicates removed, order kept)."""
    names = []
    seen = set()
    for proc in psutil.process_iter(attrs=['name']):
        try:
            name = proc.info.get('name') or ''
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def check_server_status():
    """
    Reports whether a known server executable is currently running.

    Returns:
        (is_running, matched_names) - matched_names lists the running
        process names that matched the server executable list.
    """
    try:
        running = list_process_names()
    except psutil.Error as e:
        logging.error(f"Unable to read the process table: {e}")
        return False, []
    matched = [name for name in running if is_server_executable(name)]
    for name in matched:
        logging.info(f"Found running server process: {name}")
    return bool(matched), matched
