# learning_store.py
# -*- coding: utf-8 -*-
"""
Persistent record of executable paths that worked and launch attempts that failed.

The record is read once at the start of a discovery run and rewritten after
each launch outcome. Storage problems never reach the caller: a missing or
corrupt file reads as an empty record, and a failed write is only logged.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import config
from utils import path_key


@dataclass
class FailedAttempt:
    server_path: str
    client_path: str
    timestamp: str

    def to_dict(self):
        return {
            "server_path": self.server_path,
            "client_path": self.client_path,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            server_path=str(data.get("server_path") or ""),
            client_path=str(data.get("client_path") or ""),
            timestamp=str(data.get("timestamp") or ""),
        )


@dataclass
class LearningRecord:
    successful_paths: List[str] = field(default_factory=list)
    failed_attempts: List[FailedAttempt] = field(default_factory=list)
    last_updated: Optional[str] = None

    def has_successful_path(self, path):
        key = path_key(path)
        return bool(key) and any(path_key(p) == key for p in self.successful_paths)

    def has_failed_path(self, path):
        """True if the path took part in any recorded failed attempt."""
        key = path_key(path)
        if not key:
            return False
        for attempt in self.failed_attempts:
            if key in (path_key(attempt.server_path), path_key(attempt.client_path)):
                return True
        return False

    def to_dict(self):
        return {
            "successful_paths": list(self.successful_paths),
            "failed_attempts": [a.to_dict() for a in self.failed_attempts],
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError("Learning data root is not an object")
        paths = data.get("successful_paths", [])
        attempts = data.get("failed_attempts", [])
        if not isinstance(paths, list) or not isinstance(attempts, list):
            raise ValueError("Learning data has invalid field types")
        record = cls(last_updated=data.get("last_updated"))
        for p in paths:
            if isinstance(p, str) and p and not record.has_successful_path(p):
                record.successful_paths.append(p)
        record.failed_attempts = [FailedAttempt.from_dict(a) for a in attempts if isinstance(a, dict)]
        record.failed_attempts = record.failed_attempts[-config.MAX_FAILED_ATTEMPTS:]
        return record


def get_learning_file_path():
    return os.path.join(config.get_app_data_folder(), config.LEARNING_FILENAME)


def load_learning_data(file_path=None):
    """
    Reads the learning record.

    Returns a fresh empty record if the file does not exist or cannot be
    parsed. A corrupt file is left in place; the next save overwrites it.
    """
    file_path = file_path or get_learning_file_path()
    if not os.path.isfile(file_path):
        logging.debug(f"No learning data found at '{file_path}', starting empty.")
        return LearningRecord()
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        record = LearningRecord.from_dict(data)
        logging.info(f"Learning data loaded: {len(record.successful_paths)} successful path(s), "
                     f"{len(record.failed_attempts)} failed attempt(s).")
        return record
    except (OSError, json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
        logging.warning(f"Unable to read learning data from '{file_path}' ({e}). Using an empty record.")
        return LearningRecord()


def save_learning_data(record, file_path=None):
    """
    Writes the learning record (temp file + rename). Returns True on success.
    """
    file_path = file_path or get_learning_file_path()
    record.last_updated = datetime.now().isoformat()
    temp_path = file_path + ".tmp"
    try:
        os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(record.to_dict(), f, indent=2)
        os.replace(temp_path, file_path)
        logging.debug(f"Learning data saved to '{file_path}'.")
        return True
    except (OSError, TypeError, ValueError) as e:
        logging.error(f"Unable to save learning data to '{file_path}': {e}")
        try:
            if os.path.exists(temp_path):
                os.remove(temp_path)
        except OSError:
            pass
        return False


def record_outcome(server_path, client_path, success, file_path=None):
    """
    Feeds a launch outcome back into the store.

    On success both non-empty paths join successful_paths (no duplicates).
    On failure the pair is appended to failed_attempts, keeping only the most
    recent config.MAX_FAILED_ATTEMPTS entries.
    """
    record = load_learning_data(file_path)
    if success:
        for path in (server_path, client_path):
            if path and not record.has_successful_path(path):
                record.successful_paths.append(path)
                logging.info(f"Learned successful path: {path}")
    else:
        record.failed_attempts.append(FailedAttempt(
            server_path=server_path or "",
            client_path=client_path or "",
            timestamp=datetime.now().isoformat(),
        ))
        record.failed_attempts = record.failed_attempts[-config.MAX_FAILED_ATTEMPTS:]
        logging.info(f"Recorded failed attempt (server='{server_path}', client='{client_path}').")
    return save_learning_data(record, file_path)
