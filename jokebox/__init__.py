# jokebox: fresh jokes from the command line
from .engine import FreshnessEngine
from .store import JokeStore

__version__ = "0.1.0"

__all__ = ["FreshnessEngine", "JokeStore", "__version__"]
