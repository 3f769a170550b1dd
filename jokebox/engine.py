"""Produce one joke the user has not seen yet."""

import random
from datetime import timedelta
from typing import Callable, Optional

from jokebox import source_client
from jokebox.config import DEFAULT_SYNC_DAYS, Log, Source, quiet
from jokebox.errors import DuplicateContentExhausted, ParseError, PoolExhausted
from jokebox.extractor import extract
from jokebox.store import JokeStore
from jokebox.sync import SyncScheduler


MAX_ATTEMPTS = 5


class FreshnessEngine:
    """Pick the acquisition strategy for a language and run it.

    API-backed languages fetch live and skip anything already stored.
    Document-backed languages rotate through a locally synced pool, resetting
    it once every joke has been shown.
    """

    def __init__(
        self,
        store: JokeStore,
        sources: dict,
        fetch: Callable = source_client.fetch,
        max_attempts: int = MAX_ATTEMPTS,
        sync_threshold: timedelta = timedelta(days=DEFAULT_SYNC_DAYS),
        rng: Optional[random.Random] = None,
        log: Log = quiet,
    ):
        self.store = store
        self.sources = sources
        self.fetch = fetch
        self.max_attempts = max_attempts
        self.sync_threshold = sync_threshold
        self.rng = rng or random.Random()
        self.log = log

    def source_for(self, language: str) -> Source:
        try:
            return self.sources[language]
        except KeyError:
            raise ValueError(f"No joke source configured for language {language!r}")

    def get_joke(self, language: str) -> str:
        """Return a joke for ``language``, falling back to a stored one if the
        live source keeps repeating itself."""
        source = self.source_for(language)
        if not source.structured:
            return self.next_curated(source)

        try:
            return self.fetch_fresh(source)
        except DuplicateContentExhausted as e:
            self.log(f"  {e}; falling back to a stored joke")
            record = self.store.pick_random(language)
            if record is None:
                raise
            return record.text

    # --- Live dedup ---

    def fetch_fresh(self, source: Source) -> str:
        """Fetch until the source yields a joke not stored for this language.

        Raises:
            DuplicateContentExhausted: after ``max_attempts`` repeats.
        """
        headers = source_client.build_headers(structured=source.structured)

        for attempt in range(1, self.max_attempts + 1):
            joke = self._joke_from(self.fetch(source.url, headers))

            if not self.store.exists(joke, source.language):
                self.store.insert(joke, source.language, shown=True)
                return joke

            self.log(f"  Joke already seen, retrying ({attempt}/{self.max_attempts})...")

        raise DuplicateContentExhausted(self.max_attempts)

    def _joke_from(self, result: source_client.FetchResult) -> str:
        if isinstance(result, source_client.Structured):
            return result.record.joke
        if isinstance(result, source_client.Document):
            jokes = extract(result.text)
            if not jokes:
                raise ParseError("no jokes found in document")
            return self.rng.choice(jokes)
        raise TypeError(f"Unexpected fetch result: {result!r}")

    # --- Curated rotation ---

    def next_curated(self, source: Source) -> str:
        """Return the next unshown joke from the synced pool, reshuffling when
        the pool runs dry.

        Raises:
            PoolExhausted: if nothing is stored for the language at all.
        """
        SyncScheduler(self.store, source, self.sync_threshold, self.fetch, self.log).sync_if_stale()

        record = self.store.pick_unshown(source.language)
        if record is None:
            self.log(f"  All {source.language} jokes shown, starting a new round")
            self.store.reset_shown(source.language)
            record = self.store.pick_unshown(source.language)
            if record is None:
                raise PoolExhausted(source.language)

        self.store.mark_shown(record.id)
        return record.text
