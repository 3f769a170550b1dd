"""Fetch raw joke payloads from a remote source."""

from dataclasses import dataclass
from typing import Union

import requests

from jokebox.errors import ParseError, TransportError


REQUEST_TIMEOUT = 10
USER_AGENT = "jokebox/0.1.0"


@dataclass(frozen=True)
class JokeResponse:
    """A single joke as returned by the JSON API."""

    id: str
    joke: str
    status: int


@dataclass(frozen=True)
class Structured:
    record: JokeResponse


@dataclass(frozen=True)
class Document:
    text: str


FetchResult = Union[Structured, Document]


def build_headers(structured: bool, user_agent: str = USER_AGENT) -> dict:
    headers = {"User-Agent": user_agent}
    if structured:
        headers["Accept"] = "application/json"
    return headers


def fetch(endpoint: str, headers: dict) -> FetchResult:
    """GET ``endpoint`` once and classify the body by its content type.

    The HTTP status is not checked: an error page is still handed back
    as a Document (or fails to parse as a record).

    Raises:
        TransportError: if the request cannot be sent or the body read.
        ParseError: if a JSON response is not a valid joke record.
    """
    try:
        resp = requests.get(endpoint, headers=headers, timeout=REQUEST_TIMEOUT)
        body = resp.text
    except requests.RequestException as e:
        raise TransportError(f"Failed to fetch {endpoint}: {e}") from e

    content_type = resp.headers.get("Content-Type", "").lower()
    if "json" not in content_type:
        return Document(body)

    try:
        data = resp.json()
    except ValueError as e:
        raise ParseError(f"Malformed JSON response from {endpoint}: {e}") from e
    return Structured(parse_record(data))


def parse_record(data) -> JokeResponse:
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

    joke = data.get("joke")
    if not isinstance(joke, str) or not joke:
        raise ParseError("JSON response has no joke text")

    status = data.get("status")
    if not isinstance(status, int):
        status = 0
    return JokeResponse(id=str(data.get("id", "")), joke=joke, status=status)
