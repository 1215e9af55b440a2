from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import main
from main import _parse_args


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "0.0.0.0", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 8080


def test_list_users_subcommand_available() -> None:
    args = _parse_args(["list-users"])
    assert args.command == "list-users"


def test_list_users_prints_seeded_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    seed = tmp_path / "seed.yaml"
    seed.write_text(
        "users:\n  - name: Ann\n    email: Ann@X.com\n    password: pw1\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("STOREFRONT_SEED_FILE", str(seed))
    monkeypatch.setenv("STOREFRONT_BCRYPT_ROUNDS", "4")

    main.main(["list-users"])

    output = capsys.readouterr().out
    assert "ann@x.com" in output
    assert "pw1" not in output


def test_list_users_without_seed(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.delenv("STOREFRONT_SEED_FILE", raising=False)
    monkeypatch.setenv("STOREFRONT_BCRYPT_ROUNDS", "4")

    main.main(["list-users"])

    assert "No users are currently registered." in capsys.readouterr().out


def test_invalid_configuration_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_BCRYPT_ROUNDS", "lots")
    with pytest.raises(SystemExit):
        main.main(["list-users"])


def test_missing_seed_file_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_SEED_FILE", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("STOREFRONT_BCRYPT_ROUNDS", "4")
    with pytest.raises(SystemExit):
        main.main(["list-users"])
