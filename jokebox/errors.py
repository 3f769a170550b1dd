"""Exceptions raised while acquiring a joke."""


class JokeboxError(RuntimeError):
    """Base class for every failure that should end the run."""


class TransportError(JokeboxError):
    """The request could not be built, sent, or its body read."""


class ParseError(JokeboxError):
    """The response could not be turned into joke text."""


class StoreError(JokeboxError):
    """A read or write against the SQLite store failed."""


class DuplicateContentExhausted(JokeboxError):
    def __init__(self, attempts: int):
        super().__init__(f"could not find a new joke after {attempts} attempts")
        self.attempts = attempts


class PoolExhausted(JokeboxError):
    def __init__(self, language: str):
        super().__init__(f"no jokes stored for language {language!r}")
        self.language = language
