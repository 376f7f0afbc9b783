"""
StockConfig schema.

The typed form of ``settings.yaml``.  The loader parses YAML into this
frozen dataclass; ``bridges`` hands its values to kernel constructors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields


@dataclass(frozen=True)
class StockConfig:
    """Runtime settings for a stock dashboard instance."""

    default_actor: str = "Administrator"
    avatar_url_template: str = "https://i.pravatar.cc/150?u={email}"
    min_password_length: int = 6
    search_result_limit: int = 5
    backup_filename_prefix: str = "backup"
    log_level: str = "INFO"
    checksum: str = ""

    def __post_init__(self):
        if not self.default_actor:
            raise ValueError("default_actor must not be empty")
        if "{email}" not in self.avatar_url_template:
            raise ValueError("avatar_url_template must contain '{email}'")
        if self.min_password_length < 1:
            raise ValueError("min_password_length must be at least 1")
        if self.search_result_limit < 1:
            raise ValueError("search_result_limit must be at least 1")
        if not self.backup_filename_prefix:
            raise ValueError("backup_filename_prefix must not be empty")
        if self.log_level.upper() not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log_level '{self.log_level}'")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls)) - {"checksum"}
