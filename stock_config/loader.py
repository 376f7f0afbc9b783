"""
Configuration Loader (``stock_config.loader``).

Responsibility
--------------
Loads YAML files and parses them into typed objects: settings into
``StockConfig`` and seed fixtures into the kernel's ``StoreSnapshot``.
Runtime callers go through ``stock_config.get_active_config()``.

Invariants enforced
-------------------
* Unknown settings keys are rejected; no silent typos.
* Every parsed object is frozen.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or invalid values  -> ``ValueError``.
* Seed records that do not parse  -> ``KeyError`` / ``TypeError`` /
  ``ValueError`` from the record codec.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from stock_config.schema import StockConfig
from stock_kernel.domain.codec import BACKUP_KEYS, snapshot_from_document
from stock_kernel.domain.snapshot import StoreSnapshot


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (possibly empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def parse_config(data: dict[str, Any]) -> StockConfig:
    """
    Parse a ``StockConfig`` from a dict.

    Raises:
        ValueError: on unknown keys or invalid values.
    """
    unknown = set(data) - StockConfig.field_names()
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
    return StockConfig(**data, checksum=compute_checksum(data))


def load_config(path: Path) -> StockConfig:
    return parse_config(load_yaml_file(path))


def load_seed(path: Path) -> StoreSnapshot:
    """
    Load an initial store snapshot from a YAML or JSON seed file.

    The seed uses the backup document shape; absent collections default to
    empty.  JSON is a subset of YAML, so one parser covers both.
    """
    data = load_yaml_file(path)
    document = {key: data.get(key) or ({} if key == "historyData" else []) for key in BACKUP_KEYS}
    return snapshot_from_document(document)
