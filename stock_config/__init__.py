"""
stock_config -- single public entrypoint for dashboard configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files.

Architecture position:
    Configuration -- sits above ``stock_kernel``.  The kernel MUST NEVER
    import from ``stock_config``; ``bridges`` translates settings into
    kernel constructor arguments.

Failure modes:
    - ``FileNotFoundError`` -- the requested settings file does not exist.
    - ``ValueError`` -- unknown keys or invalid values.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``STOCK_CONFIG_TRACE`` log entry with the settings checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from stock_config.loader import load_config, load_seed
from stock_config.schema import StockConfig

_logger = logging.getLogger("stock_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"
DEFAULT_SEED_PATH = Path(__file__).parent / "fixtures" / "seed.yaml"

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_SEED_PATH",
    "StockConfig",
    "get_active_config",
    "load_seed",
]


def get_active_config(config_path: Path | None = None) -> StockConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a settings YAML file.
            Defaults to stock_config/settings.yaml.

    Raises:
        FileNotFoundError: If the settings file does not exist.
        ValueError: If the settings fail validation.
    """
    config = load_config(config_path or DEFAULT_CONFIG_PATH)

    _logger.info(
        "STOCK_CONFIG_TRACE",
        extra={
            "trace_type": "STOCK_CONFIG_TRACE",
            "checksum": config.checksum,
            "default_actor": config.default_actor,
            "search_result_limit": config.search_result_limit,
            "min_password_length": config.min_password_length,
        },
    )
    return config
