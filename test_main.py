"""Tests for the command-line interface."""

import pytest

from cyfer import main as cli
from cyfer import vault as ops
from cyfer.config import VAULT_PATH_ENV
from cyfer.models import SecretBundle

PASSWORD = "Tr0ub4dor"


@pytest.fixture(autouse=True)
def fast_defaults(monkeypatch, fast_params):
    monkeypatch.setattr(ops, "DEFAULT_KDF_PARAMS", fast_params)


@pytest.fixture
def run(monkeypatch, vault_path):
    """Run the CLI against vault_path with scripted prompt answers."""
    def runner(*argv, secrets=(), inputs=()):
        hidden = iter(secrets)
        echoed = iter(inputs)
        monkeypatch.setattr(cli.getpass, "getpass", lambda prompt="": next(hidden))
        monkeypatch.setattr("builtins.input", lambda prompt="": next(echoed))
        with pytest.raises(SystemExit) as exit_info:
            cli.main(["-d", str(vault_path), *argv])
        return exit_info.value.code
    return runner


def test_init(run, vault_path, capsys):
    assert run("init", secrets=[PASSWORD, PASSWORD]) == 0

    assert vault_path.is_file()
    assert f"Vault initialized at {vault_path}" in capsys.readouterr().out


def test_init_password_mismatch(run, vault_path, capsys):
    assert run("init", secrets=[PASSWORD, "typo"]) == 1

    assert not vault_path.exists()
    assert "Passwords do not match" in capsys.readouterr().out


def test_init_twice(run, capsys):
    run("init", secrets=[PASSWORD, PASSWORD])

    assert run("init", secrets=[PASSWORD, PASSWORD]) == 5
    assert "already initialized" in capsys.readouterr().out


def test_add_get_list_delete(run, vault_path, capsys):
    run("init", secrets=[PASSWORD, PASSWORD])

    assert run("add", "email", secrets=[PASSWORD, "p@ss"],
               inputs=["bob", "backup code: 1234"]) == 0
    assert run("add", "github", secrets=[PASSWORD, "s3cr3t"], inputs=["alice", ""]) == 0
    capsys.readouterr()

    assert run("get", "email", secrets=[PASSWORD]) == 0
    assert capsys.readouterr().out.splitlines() == ["bob , p@ss", "backup code: 1234"]

    assert run("get", "github", secrets=[PASSWORD]) == 0
    assert capsys.readouterr().out.splitlines() == ["alice , s3cr3t"]

    assert run("list", secrets=[PASSWORD]) == 0
    assert capsys.readouterr().out.splitlines() == ["email", "github"]

    assert run("del", "github", secrets=[PASSWORD]) == 0
    assert run("delete", "email", secrets=[PASSWORD]) == 0
    assert ops.list_services(ops.read(vault_path), PASSWORD) == []


def test_empty_notes_are_stored_as_none(run, vault_path):
    run("init", secrets=[PASSWORD, PASSWORD])
    run("add", "github", secrets=[PASSWORD, "s3cr3t"], inputs=["alice", ""])

    bundle = ops.get_service(ops.read(vault_path), PASSWORD, "github")
    assert bundle == SecretBundle(username="alice", secret="s3cr3t", notes=None)


def test_error_kinds_have_distinct_exit_codes(run, capsys):
    assert run("list", secrets=[PASSWORD]) == 4

    run("init", secrets=[PASSWORD, PASSWORD])
    capsys.readouterr()

    assert run("list", secrets=["wrong"]) == 2
    assert "Incorrect master password" in capsys.readouterr().out

    assert run("get", "missing", secrets=[PASSWORD]) == 3
    assert run("delete", "missing", secrets=[PASSWORD]) == 3


def test_corrupt_vault_exit_code(run, vault_path):
    vault_path.write_text("{ broken")

    assert run("list", secrets=[PASSWORD]) == 6


def test_vault_path_from_environment(monkeypatch, tmp_path):
    target = tmp_path / "env-vault.json"
    monkeypatch.setenv(VAULT_PATH_ENV, str(target))

    assert cli.get_manager().vault_path == target
    assert cli.get_manager(str(tmp_path / "explicit.json")).vault_path == tmp_path / "explicit.json"
