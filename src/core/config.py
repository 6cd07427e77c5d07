"""Session coordinator configuration loader."""

from dataclasses import dataclass
from pathlib import Path

import yaml

from src.core.exceptions import ConfigError
from src.core.shared_types import LeavePolicy


@dataclass
class Settings:
    leave_policy: LeavePolicy = LeavePolicy.IMMEDIATE
    grace_period_s: float = 30.0
    allow_spectators: bool = True
    rematch_swaps_colors: bool = True
    database_url: str = "sqlite:///dambrete.db"


def load_settings(path: Path) -> Settings:
    """Load settings from YAML file. Every key is optional."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    session = raw.get("session", {})
    database = raw.get("database", {})
    defaults = Settings()

    policy_name = str(session.get("leave_policy", defaults.leave_policy)).lower()
    if policy_name not in {policy.value for policy in LeavePolicy}:
        raise ConfigError(
            f"Unknown leave_policy {policy_name!r}. Pick one from {','.join(p.value for p in LeavePolicy)}"
        )

    grace_period_s = float(session.get("grace_period_s", defaults.grace_period_s))
    if grace_period_s < 0:
        raise ConfigError(f"grace_period_s must not be negative, got {grace_period_s}")

    return Settings(
        leave_policy=LeavePolicy(policy_name),
        grace_period_s=grace_period_s,
        allow_spectators=bool(
            session.get("allow_spectators", defaults.allow_spectators)
        ),
        rematch_swaps_colors=bool(
            session.get("rematch_swaps_colors", defaults.rematch_swaps_colors)
        ),
        database_url=database.get("url", defaults.database_url),
    )
