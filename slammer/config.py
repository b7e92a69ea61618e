# slammer/config.py
"""
YAML configuration.

A user ``config.yml`` is merged over DEFAULT_CONFIG_TEXT and turned into a
SlamSettings object. Example::

    osc:
      tx_host: 192.168.1.20
      tx_port: 53000
    address: /cue/title/liveText
    sleep: 10ms
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import yaml

from .dispatcher import DispatchTarget
from .durations import parse_duration
from .errors import ConfigError
from .message import is_legal_address

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SLAMMER_CONFIG"
DEFAULT_CONFIG_PATH = "config.yml"

DEFAULT_CONFIG_TEXT = """
osc:
  tx_host: 127.0.0.1
  tx_port: 53000
address: /cue/title/liveText
sleep: 0s
limit: null
log_every: 1000
log_level: INFO
"""

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml(path: str, default_text: str = None) -> dict:
    if path and os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"cannot parse {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
        return data
    if default_text is not None:
        return yaml.safe_load(default_text)
    return {}


def merge(base: dict, override: dict) -> dict:
    """Recursive dict merge; override wins, nested mappings are merged key by key."""
    out = dict(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = merge(out[k], v)
        else:
            out[k] = v
    return out


DEFAULT_CONFIG = load_yaml(None, DEFAULT_CONFIG_TEXT)


@dataclass(frozen=True)
class SlamSettings:
    target: DispatchTarget
    address: str = "/cue/title/liveText"
    sleep: float = 0.0
    limit: Optional[int] = None
    log_every: int = 1000
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, cfg: dict) -> "SlamSettings":
        cfg = merge(DEFAULT_CONFIG, cfg or {})

        osc_cfg = cfg.get("osc") or {}
        if not isinstance(osc_cfg, dict):
            raise ConfigError("'osc' must be a mapping with tx_host and tx_port")
        port = osc_cfg.get("tx_port")
        # quoted ports ("53000") are fine; bools and floats are not
        if isinstance(port, str) and port.strip().isdigit():
            port = int(port)
        if isinstance(port, bool) or not isinstance(port, int):
            raise ConfigError(f"osc.tx_port must be an integer, got {port!r}")
        target = DispatchTarget(str(osc_cfg.get("tx_host") or ""), port)

        address = cfg.get("address")
        if not isinstance(address, str) or not is_legal_address(address):
            raise ConfigError(f"address is not a legal OSC address: {address!r}")

        try:
            sleep = parse_duration(cfg.get("sleep"))
        except ValueError as e:
            raise ConfigError(f"sleep: {e}") from e

        limit = cfg.get("limit")
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 0):
            raise ConfigError(f"limit must be null or a non-negative integer, got {limit!r}")

        log_every = cfg.get("log_every")
        if isinstance(log_every, bool) or not isinstance(log_every, int) or log_every < 0:
            raise ConfigError(f"log_every must be a non-negative integer, got {log_every!r}")

        log_level = str(cfg.get("log_level") or "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

        return cls(
            target=target,
            address=address,
            sleep=sleep,
            limit=limit,
            log_every=log_every,
            log_level=log_level,
        )


def load_settings(path: str = None) -> SlamSettings:
    """Load settings from path, $SLAMMER_CONFIG or ./config.yml; a missing file means defaults."""
    path = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    if os.path.exists(path):
        logger.info("Loading config from %s", path)
    else:
        logger.info("No config at %s, using defaults", path)
    return SlamSettings.from_dict(load_yaml(path))
