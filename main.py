"""jokebox: print one joke you haven't seen before."""

import argparse
import sys
from datetime import timedelta
from pathlib import Path

from jokebox.config import LANGUAGES, Settings, quiet
from jokebox.engine import FreshnessEngine
from jokebox.errors import JokeboxError
from jokebox.store import JokeStore


def log_to_stderr(message: str) -> None:
    # stdout is reserved for the joke itself.
    print(message, file=sys.stderr)


def parse_args(argv, settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="jokebox", description=__doc__)
    parser.add_argument(
        "--dbdir",
        default=str(settings.dbdir),
        help="Directory to store the SQLite database (default: %(default)s)",
    )
    parser.add_argument(
        "--lang",
        choices=sorted(LANGUAGES),
        default=settings.lang,
        help="Joke language (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=settings.verbose,
        help="Print progress to stderr",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    try:
        settings = Settings.load()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    args = parse_args(argv, settings)
    settings.dbdir = Path(args.dbdir).expanduser()
    settings.lang = args.lang
    settings.verbose = args.verbose
    try:
        settings.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    log = log_to_stderr if settings.verbose else quiet

    try:
        settings.dbdir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error: could not create database directory {settings.dbdir}: {e}", file=sys.stderr)
        return 1

    try:
        with JokeStore(settings.db_path, log=log) as store:
            log(f"Database: {settings.db_path}")
            store.init_schema()

            engine = FreshnessEngine(
                store,
                settings.sources(),
                sync_threshold=timedelta(days=settings.sync_days),
                log=log,
            )
            joke = engine.get_joke(settings.lang)
    except JokeboxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(joke)
    return 0


if __name__ == "__main__":
    sys.exit(main())
