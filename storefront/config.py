"""Configuration for the storefront identity service."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

from .passwords import DEFAULT_ROUNDS, MAX_ROUNDS, MIN_ROUNDS


@dataclass(frozen=True)
class SeedUser:
    """A user account created when the service starts."""

    name: str
    email: str
    password: str = field(repr=False)

    @staticmethod
    def from_dict(data: Dict[str, object]) -> "SeedUser":
        """Create a :class:`SeedUser` from raw dictionary data."""
        if not isinstance(data, dict):
            raise ValueError("Each seed user must be a mapping")
        required_fields = {"name", "email", "password"}
        missing = {key for key in required_fields if not str(data.get(key) or "").strip()}
        if missing:
            raise ValueError(f"Missing required seed user fields: {', '.join(sorted(missing))}")
        return SeedUser(
            name=str(data["name"]),
            email=str(data["email"]),
            password=str(data["password"]),
        )


@dataclass(frozen=True)
class Settings:
    bcrypt_rounds: int = DEFAULT_ROUNDS
    admin_tokens: List[str] = field(default_factory=list, repr=False)
    seed_file: Optional[Path] = None
    log_level: str = "INFO"


def _parse_tokens(raw: str) -> List[str]:
    return [token.strip() for token in raw.split(",") if token.strip()]


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``STOREFRONT_*`` environment variables."""

    env = os.environ if environ is None else environ

    raw_rounds = env.get("STOREFRONT_BCRYPT_ROUNDS", "").strip()
    try:
        rounds = int(raw_rounds) if raw_rounds else DEFAULT_ROUNDS
    except ValueError as exc:
        raise ValueError(f"STOREFRONT_BCRYPT_ROUNDS must be an integer, got {raw_rounds!r}") from exc
    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        raise ValueError(f"STOREFRONT_BCRYPT_ROUNDS must be between {MIN_ROUNDS} and {MAX_ROUNDS}")

    seed_value = env.get("STOREFRONT_SEED_FILE", "").strip()
    seed_file = Path(seed_value).expanduser().resolve(strict=False) if seed_value else None

    return Settings(
        bcrypt_rounds=rounds,
        admin_tokens=_parse_tokens(env.get("STOREFRONT_ADMIN_TOKENS", "")),
        seed_file=seed_file,
        log_level=(env.get("STOREFRONT_LOG_LEVEL", "").strip() or "INFO").upper(),
    )


def load_seed_users(path: Path) -> List[SeedUser]:
    """Load seed user definitions from a YAML file."""
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise ValueError("Seed file must contain a mapping with a 'users' key")

    users_raw = raw.get("users") or []
    if not isinstance(users_raw, list):
        raise ValueError("The 'users' key of the seed file must be a list")

    return [SeedUser.from_dict(item) for item in users_raw]


__all__ = ["SeedUser", "Settings", "load_seed_users", "load_settings"]
