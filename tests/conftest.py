import pytest

from jokebox.config import API_KIND, DOCUMENT_KIND, Source
from jokebox.source_client import Document, JokeResponse, Structured
from jokebox.store import JokeStore


API_URL = "https://api.test/"
DOC_URL = "https://docs.test/witze.md"


class FakeFetch:
    """Stands in for source_client.fetch, replaying canned results in order."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def __call__(self, endpoint, headers):
        self.calls.append((endpoint, headers))
        result = self.results[min(len(self.calls), len(self.results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


def joke(text, joke_id="1"):
    return Structured(JokeResponse(id=joke_id, joke=text, status=200))


def document(*lines):
    return Document("\n".join(lines))


@pytest.fixture
def store(tmp_path):
    with JokeStore(tmp_path / "jokes.db") as s:
        s.init_schema()
        yield s


@pytest.fixture
def sources():
    return {
        "en": Source(language="en", url=API_URL, kind=API_KIND),
        "de": Source(language="de", url=DOC_URL, kind=DOCUMENT_KIND),
    }


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "JOKEBOX_DBDIR",
        "JOKEBOX_LANG",
        "JOKEBOX_API_URL",
        "JOKEBOX_DOCUMENT_URL",
        "JOKEBOX_SYNC_DAYS",
        "JOKEBOX_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)
