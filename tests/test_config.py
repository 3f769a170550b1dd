import pytest

from jokebox import config
from jokebox.config import API_KIND, DOCUMENT_KIND, Settings


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    settings = Settings.load(env_file=str(tmp_path / "missing.env"))

    assert settings.lang == "en"
    assert settings.sync_days == 7
    assert settings.db_path.name == "jokes.db"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("JOKEBOX_DBDIR", str(tmp_path / "store"))
    monkeypatch.setenv("JOKEBOX_LANG", "DE")
    monkeypatch.setenv("JOKEBOX_SYNC_DAYS", "3")
    monkeypatch.setenv("JOKEBOX_VERBOSE", "true")

    settings = Settings.load(env_file=str(tmp_path / "missing.env"))

    assert settings.dbdir == tmp_path / "store"
    assert settings.lang == "de"
    assert settings.sync_days == 3
    assert settings.verbose is True


def test_env_file_is_loaded(tmp_path, monkeypatch):
    env_file = tmp_path / "config.env"
    env_file.write_text("JOKEBOX_API_URL=https://jokes.test/api\n")
    monkeypatch.delenv("JOKEBOX_API_URL", raising=False)

    settings = Settings.load(env_file=str(env_file))

    assert settings.api_url == "https://jokes.test/api"


def test_invalid_values(tmp_path, monkeypatch):
    monkeypatch.setenv("JOKEBOX_SYNC_DAYS", "weekly")
    with pytest.raises(ValueError):
        Settings.load(env_file=str(tmp_path / "missing.env"))

    monkeypatch.setenv("JOKEBOX_SYNC_DAYS", "0")
    settings = Settings.load(env_file=str(tmp_path / "missing.env"))
    with pytest.raises(ValueError):
        settings.validate()


def test_sources_follow_settings():
    settings = Settings(api_url="https://a.test/", document_url="https://d.test/witze.md")

    sources = settings.sources()

    assert sources["en"].kind == API_KIND and sources["en"].url == "https://a.test/"
    assert sources["de"].kind == DOCUMENT_KIND and sources["de"].url == "https://d.test/witze.md"
    assert sources["en"].structured and not sources["de"].structured


def test_bad_language_is_reported_by_validate_not_load(tmp_path, monkeypatch):
    monkeypatch.setenv("JOKEBOX_LANG", "fr")

    settings = Settings.load(env_file=str(tmp_path / "missing.env"))
    with pytest.raises(ValueError, match="unsupported language"):
        settings.validate()

    settings.lang = "en"
    settings.validate()


def test_document_language_requires_url():
    with pytest.raises(ValueError, match="JOKEBOX_DOCUMENT_URL is required for --lang de"):
        Settings(lang="de").validate()

    Settings(lang="de", document_url="https://d.test/witze.md").validate()
    Settings(lang="en").validate()


def test_home_config_env_is_read(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    (home / "config.env").write_text("JOKEBOX_SYNC_DAYS=3\n")
    monkeypatch.setattr(config, "DEFAULT_DBDIR", home)
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("JOKEBOX_SYNC_DAYS", raising=False)

    assert Settings.load().sync_days == 3
