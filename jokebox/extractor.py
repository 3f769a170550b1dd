"""Pull individual jokes out of a markdown list."""

MARKER = "- "


def extract(document: str) -> list[str]:
    """Return every line starting with ``"- "``, marker removed, in order.

    Text after the marker is kept exactly as written. Lines end at ``\\n``
    (or ``\\r\\n``) only; other Unicode separators stay inside the joke.
    """
    jokes = []
    for line in document.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line.startswith(MARKER):
            jokes.append(line[len(MARKER):])
    return jokes
