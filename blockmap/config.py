"""
Settings loaded from an optional ``blockmap.yaml``.

Example::

    indent: 2
    region: eu-west-1
    profile: media
    waiter:
      delay: 15
      max_attempts: 40
"""
import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml
from rich.console import Console

console = Console(stderr=True)

CONFIG_FILE = "blockmap.yaml"


@dataclass(frozen=True)
class Settings:
    indent: int = 2
    region: Optional[str] = None
    profile: Optional[str] = None
    waiter_delay: Optional[int] = None
    waiter_max_attempts: Optional[int] = None

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def waiter_config(self) -> Dict[str, int]:
        config: Dict[str, int] = {}
        if self.waiter_delay is not None:
            config["Delay"] = self.waiter_delay
        if self.waiter_max_attempts is not None:
            config["MaxAttempts"] = self.waiter_max_attempts
        return config


def _positive_int(raw: Any, key: str) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        console.print(f"[yellow]Warning:[/yellow] ignoring '{key}' in config: expected a non-negative integer")
        return None
    return raw


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from ``path`` or ``./blockmap.yaml``; defaults if absent."""
    config_file = path or CONFIG_FILE
    if not os.path.exists(config_file):
        if path:
            console.print(f"[yellow]Warning:[/yellow] config file '{path}' not found, using defaults.")
        return Settings()

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        console.print(f"[yellow]Warning:[/yellow] failed to read {config_file}: {exc}")
        return Settings()

    if not isinstance(data, dict):
        console.print(f"[yellow]Warning:[/yellow] {config_file} must contain a mapping, using defaults.")
        return Settings()

    waiter = data.get("waiter") or {}
    if not isinstance(waiter, dict):
        console.print("[yellow]Warning:[/yellow] ignoring 'waiter' in config: expected a mapping")
        waiter = {}

    indent = _positive_int(data.get("indent"), "indent")
    region = data.get("region")
    profile = data.get("profile")
    return Settings(
        indent=2 if indent is None else indent,
        region=str(region) if region else None,
        profile=str(profile) if profile else None,
        waiter_delay=_positive_int(waiter.get("delay"), "waiter.delay"),
        waiter_max_attempts=_positive_int(waiter.get("max_attempts"), "waiter.max_attempts"),
    )
