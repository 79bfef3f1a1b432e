# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Runtime settings.

Precedence: PRICEGATE_* environment variables, then the optional YAML file
(``PRICEGATE_CONFIG``, default ``<data_dir>/pricegate.yml``), then defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pricegate.core.utils import is_truthy
from pricegate.services.price_feed import DEFAULT_API_URL, DEFAULT_INTERVAL_SECONDS

# Anchor defaults to the project root, not the current working directory.
BASE_DIR = Path(__file__).resolve().parents[2]
ENV_PREFIX = "PRICEGATE_"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    storage_path: Path
    price_api_url: str = DEFAULT_API_URL
    poll_interval: int = DEFAULT_INTERVAL_SECONDS
    http_timeout: float = 10.0
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"


def _load_settings_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return raw if isinstance(raw, dict) else {}


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def load_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ

    data_dir = Path(env.get(ENV_PREFIX + "DATA_DIR") or (BASE_DIR / "data")).resolve()
    config_path = Path(env.get(ENV_PREFIX + "CONFIG") or (data_dir / "pricegate.yml")).resolve()
    file_cfg = _load_settings_file(config_path)

    def pick(name: str, default: Any) -> Any:
        v = env.get(ENV_PREFIX + name.upper())
        if v not in (None, ""):
            return v
        v = file_cfg.get(name)
        return default if v is None else v

    storage_path = Path(pick("storage_path", data_dir / "storage.json")).resolve()

    return Settings(
        data_dir=data_dir,
        storage_path=storage_path,
        price_api_url=str(pick("price_api_url", DEFAULT_API_URL)).strip() or DEFAULT_API_URL,
        poll_interval=max(1, _as_int(pick("poll_interval", DEFAULT_INTERVAL_SECONDS), DEFAULT_INTERVAL_SECONDS)),
        http_timeout=_as_float(pick("http_timeout", 10.0), 10.0),
        host=str(pick("host", "127.0.0.1")),
        port=_as_int(pick("port", 8000), 8000),
        reload=is_truthy(pick("reload", "false")),
        log_level=str(pick("log_level", "INFO")).strip().upper() or "INFO",
    )
