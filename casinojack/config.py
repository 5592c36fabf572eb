"""
Configuration for the casinojack table.

Configuration is a nested dictionary. `load_config` starts from
`DEFAULT_CONFIG`, merges user overrides section by section, and picks up the
advisory API key and history database path from the environment.
"""

import copy
import os
from typing import Any, Dict, Mapping, Optional

ADVISOR_API_KEY_ENV = "CASINOJACK_ADVISOR_API_KEY"
DB_PATH_ENV = "CASINOJACK_DB_PATH"

DEFAULT_CONFIG: Dict[str, Any] = {
    "rules": {
        "dealer_hit_soft_17": True,
        "min_bet": 5.0,
        "max_bet": 1000.0,
    },
    "wallet": {
        "starting_credits": 1000.0,
    },
    "advisor": {
        "timeout": 5.0,
        "api_key": None,
    },
    "history": {
        "db_path": None,
    },
}


def _deep_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Build a full configuration.

    Explicit overrides win over environment values, which win over defaults.

    Args:
        overrides: Partial configuration to merge over the defaults
        env: Environment mapping, ``os.environ`` when omitted

    Raises:
        ValueError: If the table limits are inconsistent
    """
    env = os.environ if env is None else env
    config = copy.deepcopy(DEFAULT_CONFIG)

    if env.get(ADVISOR_API_KEY_ENV):
        config["advisor"]["api_key"] = env[ADVISOR_API_KEY_ENV]
    if env.get(DB_PATH_ENV):
        config["history"]["db_path"] = env[DB_PATH_ENV]

    if overrides:
        _deep_merge(config, overrides)

    rules = config["rules"]
    if rules["min_bet"] <= 0 or rules["max_bet"] < rules["min_bet"]:
        raise ValueError(
            f"Invalid table limits: min_bet={rules['min_bet']}, max_bet={rules['max_bet']}"
        )
    return config
