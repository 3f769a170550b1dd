"""Runtime settings: defaults, .env files, environment, then CLI flags."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv


API_KIND = "api"
DOCUMENT_KIND = "document"

DEFAULT_DBDIR = Path.home() / ".jokebox"
DEFAULT_LANG = "en"
DEFAULT_API_URL = "https://icanhazdadjoke.com/"
DEFAULT_SYNC_DAYS = 7

# language code -> kind of source that serves it
LANGUAGES = {
    "en": API_KIND,
    "de": DOCUMENT_KIND,
}

# Progress callback threaded through the store, scheduler and engine.
Log = Callable[[str], None]


def quiet(message: str) -> None:
    pass


@dataclass(frozen=True)
class Source:
    """Where jokes for one language come from."""

    language: str
    url: str
    kind: str

    @property
    def structured(self) -> bool:
        return self.kind == API_KIND


@dataclass
class Settings:
    dbdir: Path = DEFAULT_DBDIR
    lang: str = DEFAULT_LANG
    api_url: str = DEFAULT_API_URL
    document_url: str = ""
    sync_days: int = DEFAULT_SYNC_DAYS
    verbose: bool = False

    @property
    def db_path(self) -> Path:
        return self.dbdir / "jokes.db"

    @classmethod
    def load(cls, env_file: Optional[str] = None) -> "Settings":
        """Build settings from .env files and JOKEBOX_* environment variables.

        Variables already present in the environment are never overridden by
        a file. Call validate() once CLI overrides have been applied.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv(DEFAULT_DBDIR / "config.env")
            load_dotenv(Path.cwd() / ".env")

        settings = cls()
        if os.environ.get("JOKEBOX_DBDIR"):
            settings.dbdir = Path(os.environ["JOKEBOX_DBDIR"]).expanduser()
        settings.lang = os.environ.get("JOKEBOX_LANG", settings.lang).lower()
        settings.api_url = os.environ.get("JOKEBOX_API_URL", settings.api_url)
        settings.document_url = os.environ.get("JOKEBOX_DOCUMENT_URL", settings.document_url)
        settings.verbose = os.environ.get("JOKEBOX_VERBOSE", "").lower() in ("1", "true", "yes")

        days = os.environ.get("JOKEBOX_SYNC_DAYS")
        if days:
            try:
                settings.sync_days = int(days)
            except ValueError:
                raise ValueError(f"JOKEBOX_SYNC_DAYS must be an integer, got {days!r}")

        return settings

    def validate(self) -> None:
        if self.lang not in LANGUAGES:
            raise ValueError(
                f"unsupported language {self.lang!r} (choose from {', '.join(LANGUAGES)})"
            )
        if self.sync_days <= 0:
            raise ValueError(f"sync interval must be positive, got {self.sync_days}")
        if LANGUAGES[self.lang] == DOCUMENT_KIND and not self.document_url:
            raise ValueError(f"JOKEBOX_DOCUMENT_URL is required for --lang {self.lang}")

    def sources(self) -> dict:
        """Return {language: Source} for every supported language."""
        urls = {API_KIND: self.api_url, DOCUMENT_KIND: self.document_url}
        return {
            lang: Source(language=lang, url=urls[kind], kind=kind)
            for lang, kind in LANGUAGES.items()
        }
