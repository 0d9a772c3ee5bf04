from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from . import canon


@dataclass
class TableConfig:
    # Network used when a series or caller gives no offset
    default_network: str = canon.DEFAULT_NETWORK

    # Dispatch interval length for "last complete interval" lookups
    interval_minutes: int = canon.DEFAULT_INTERVAL_MIN


def default_config() -> TableConfig:
    return TableConfig()


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> TableConfig:
    """Build a TableConfig, overriding defaults from environment variables.

    Recognised:
      - OPENELECTRICITY_DEFAULT_NETWORK: 'NEM' | 'WEM' | 'AU'
    """
    env = os.environ if environ is None else environ
    cfg = default_config()
    network = env.get(canon.ENV_DEFAULT_NETWORK)
    if network:
        cfg.default_network = network.strip().upper()
    return cfg
