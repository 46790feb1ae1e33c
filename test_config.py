"""Tests for vault path resolution."""

from cyfer import config


def test_default_vault_path_under_data_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(config.platform, "system", lambda: "Linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    path = config.default_vault_path()

    assert path == tmp_path / "cyfer-rs" / "vault.json"
    assert path.parent.is_dir()
    assert not path.exists()


def test_default_vault_path_without_creating(monkeypatch, tmp_path):
    monkeypatch.setattr(config.platform, "system", lambda: "Linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    path = config.default_vault_path(create_dir=False)

    assert not path.parent.exists()


def test_windows_data_dir_is_roaming(monkeypatch, tmp_path):
    monkeypatch.setattr(config.platform, "system", lambda: "Windows")
    monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "Local"))

    assert config.get_data_dir() == tmp_path / "Roaming"


def test_windows_data_dir_without_appdata(monkeypatch, tmp_path):
    monkeypatch.setattr(config.platform, "system", lambda: "Windows")
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setattr(config.Path, "home", lambda: tmp_path)

    assert config.get_data_dir() == tmp_path / "AppData" / "Roaming"


def test_resolution_order(monkeypatch, tmp_path):
    monkeypatch.setattr(config.platform, "system", lambda: "Linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv(config.VAULT_PATH_ENV, raising=False)

    assert config.resolve_vault_path() == tmp_path / "xdg" / "cyfer-rs" / "vault.json"

    monkeypatch.setenv(config.VAULT_PATH_ENV, str(tmp_path / "env.json"))
    assert config.resolve_vault_path() == tmp_path / "env.json"
    assert config.resolve_vault_path(str(tmp_path / "cli.json")) == tmp_path / "cli.json"
