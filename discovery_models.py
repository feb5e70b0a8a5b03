# discovery_models.py
# -*- coding: utf-8 -*-
"""
Data types shared by the path discovery modules.

A probe emits Hit records; the ranker promotes the usable ones to Candidate
records; the orchestrator returns a DiscoveryResult.
"""

import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from utils import has_executable_extension


class SourceType(Enum):
    """Where a Hit came from. Values double as keys of config.SOURCE_WEIGHTS."""
    LEARNED = "learned"
    REGISTRY = "registry"
    COMMON_PATH = "common_path"
    USER_DIR = "user_dir"
    PROCESS = "process"
    RECENT_SHORTCUT = "recent_shortcut"
    DEEP_WALK = "deep_walk"
    KNOWN_LOCATION = "known_location"
    FOLDER_PATTERN = "folder_pattern"
    STEAM = "steam"
    SERVER_DIR_COMPANION = "server_dir_companion"
    ERROR = "error"


class Role(Enum):
    SERVER = "server"
    CLIENT = "client"


@dataclass(frozen=True)
class Hit:
    """
    One raw observation made by a probe.

    file_path may name a directory (the probe only asserts that a root exists)
    or an executable, in which case file_name is its base name. Process hits
    carry only process_name, error hits only error.
    """
    source_type: SourceType
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    depth: int = 0
    potential: bool = False
    timestamp: float = field(default_factory=time.time)
    process_name: Optional[str] = None
    error: Optional[str] = None
    secondary: bool = False
    via_shortcut: bool = False

    def __post_init__(self):
        if not isinstance(self.source_type, SourceType):
            raise ValueError(f"Invalid source_type: {self.source_type!r}")
        if not isinstance(self.depth, int) or self.depth < 0:
            raise ValueError(f"Hit depth must be a non-negative integer, got {self.depth!r}")
        if self.file_name is not None:
            if not self.file_path:
                raise ValueError("Hit with file_name requires file_path")
            if os.path.basename(self.file_path) != self.file_name:
                raise ValueError(f"file_name '{self.file_name}' does not match file_path '{self.file_path}'")
            if not has_executable_extension(self.file_name):
                raise ValueError(f"Hit file '{self.file_name}' is not an executable")

    @classmethod
    def for_file(cls, source_type, file_path, **kwargs):
        """Builds a file Hit, deriving file_name from the path."""
        norm_path = os.path.normpath(file_path)
        return cls(source_type, file_path=norm_path, file_name=os.path.basename(norm_path), **kwargs)

    @classmethod
    def for_directory(cls, source_type, dir_path, **kwargs):
        return cls(source_type, file_path=os.path.normpath(dir_path), **kwargs)

    @classmethod
    def for_error(cls, probe_name, exc):
        return cls(SourceType.ERROR, error=f"{probe_name}: {exc}")

    @property
    def is_file(self):
        return bool(self.file_path and self.file_name)

    def to_dict(self):
        data = {
            "source_type": self.source_type.value,
            "file_path": self.file_path,
            "file_name": self.file_name,
            "depth": self.depth,
            "potential": self.potential,
            "timestamp": self.timestamp,
        }
        if self.process_name:
            data["process_name"] = self.process_name
        if self.error:
            data["error"] = self.error
        if self.secondary:
            data["secondary"] = True
        if self.via_shortcut:
            data["via_shortcut"] = True
        return data


@dataclass(frozen=True)
class Candidate:
    """A Hit promoted to a role, with its computed score."""
    role: Role
    path: str
    source_type: SourceType
    depth: int
    score: int

    def to_dict(self):
        return {
            "role": self.role.value,
            "path": self.path,
            "source_type": self.source_type.value,
            "depth": self.depth,
            "score": self.score,
        }


@dataclass
class DiscoveryResult:
    server_path: str = ""
    client_path: str = ""
    confidence: int = 0
    search_results: List[Hit] = field(default_factory=list)
    server_candidates: List[Candidate] = field(default_factory=list)
    client_candidates: List[Candidate] = field(default_factory=list)

    def to_dict(self, include_candidates=True):
        data = {
            "server_path": self.server_path,
            "client_path": self.client_path,
            "confidence": self.confidence,
            "search_results": [hit.to_dict() for hit in self.search_results],
        }
        if include_candidates:
            data["server_candidates"] = [c.to_dict() for c in self.server_candidates]
            data["client_candidates"] = [c.to_dict() for c in self.client_candidates]
        return data
