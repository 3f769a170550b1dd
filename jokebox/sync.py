"""Re-ingest a bulk joke document when the local copy is older than a week."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jokebox import source_client
from jokebox.config import DEFAULT_SYNC_DAYS, Log, Source, quiet
from jokebox.errors import ParseError, StoreError
from jokebox.extractor import extract
from jokebox.store import JokeStore


SYNC_KEY = "bulk_jokes_last_sync"


def sync_key(language: str) -> str:
    return f"{SYNC_KEY}:{language}"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO 8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    try:
        ts = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


class SyncScheduler:
    def __init__(
        self,
        store: JokeStore,
        source: Source,
        threshold: timedelta = timedelta(days=DEFAULT_SYNC_DAYS),
        fetch: Callable = source_client.fetch,
        log: Log = quiet,
    ):
        self.store = store
        self.source = source
        self.threshold = threshold
        self.fetch = fetch
        self.log = log

    @property
    def key(self) -> str:
        return sync_key(self.source.language)

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        last_sync = parse_timestamp(self.store.get_sync_meta(self.key))
        # A timestamp from the future means the clock moved; resync.
        if last_sync is None or last_sync > now:
            return True
        return now - last_sync > self.threshold

    def sync_if_stale(self, now: Optional[datetime] = None) -> bool:
        """Re-ingest the document if it has not been synced recently.

        Returns True if an ingestion pass ran, False if the stored copy is
        still fresh.

        Raises:
            TransportError: if the document cannot be fetched.
            ParseError: if the document holds no jokes.
        """
        now = now or datetime.now(timezone.utc)
        if not self.is_stale(now):
            return False

        self.log(f"  Syncing {self.source.language} jokes from {self.source.url}...")
        added = self.ingest()
        self.store.set_sync_meta(self.key, now.isoformat())
        self.log(f"  Sync complete: {added} new jokes")
        return True

    def ingest(self) -> int:
        """Insert every unseen joke from the document as unshown. Returns the count added."""
        headers = source_client.build_headers(structured=False)
        result = self.fetch(self.source.url, headers)
        if not isinstance(result, source_client.Document):
            raise ParseError(f"Expected a joke document from {self.source.url}, got a JSON record")

        jokes = extract(result.text)
        if not jokes:
            raise ParseError(f"No jokes found in document from {self.source.url}")

        added = 0
        for joke in jokes:
            try:
                if self.store.exists(joke, self.source.language):
                    continue
                self.store.insert(joke, self.source.language, shown=False)
                added += 1
            except StoreError as e:
                self.log(f"  Skipping joke {joke[:40]!r}: {e}")
        return added
