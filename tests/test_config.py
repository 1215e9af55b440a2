from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storefront.config import SeedUser, load_seed_users, load_settings


def test_defaults_when_environment_is_empty() -> None:
    settings = load_settings({})
    assert settings.bcrypt_rounds == 12
    assert settings.admin_tokens == []
    assert settings.seed_file is None
    assert settings.log_level == "INFO"


def test_settings_read_from_environment(tmp_path: Path) -> None:
    seed = tmp_path / "seed.yaml"
    settings = load_settings(
        {
            "STOREFRONT_BCRYPT_ROUNDS": "5",
            "STOREFRONT_ADMIN_TOKENS": " alpha, ,beta ",
            "STOREFRONT_SEED_FILE": str(seed),
            "STOREFRONT_LOG_LEVEL": "debug",
        }
    )
    assert settings.bcrypt_rounds == 5
    assert settings.admin_tokens == ["alpha", "beta"]
    assert settings.seed_file == seed.resolve()
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["twelve", "2", "40"])
def test_invalid_rounds_are_rejected(value: str) -> None:
    with pytest.raises(ValueError):
        load_settings({"STOREFRONT_BCRYPT_ROUNDS": value})


def test_load_seed_users(tmp_path: Path) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text(
        "users:\n"
        "  - name: Ann\n"
        "    email: ann@example.com\n"
        "    password: pw1\n"
        "  - name: Bea\n"
        "    email: bea@example.com\n"
        "    password: pw2\n",
        encoding="utf-8",
    )

    users = load_seed_users(seed)
    assert users == [
        SeedUser(name="Ann", email="ann@example.com", password="pw1"),
        SeedUser(name="Bea", email="bea@example.com", password="pw2"),
    ]
    assert "pw1" not in repr(users[0])


def test_empty_seed_file_yields_no_users(tmp_path: Path) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text("", encoding="utf-8")
    assert load_seed_users(seed) == []


def test_seed_user_missing_fields(tmp_path: Path) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text("users:\n  - name: Ann\n    email: ''\n", encoding="utf-8")
    with pytest.raises(ValueError, match="email, password"):
        load_seed_users(seed)


def test_seed_users_must_be_a_list(tmp_path: Path) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text("users: ann@example.com\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_users(seed)
