"""bottlefetch: manifest-driven bottle resolution, verification and caching.

Given a bottle JSON manifest (file, URL, or bare package name), selects the
bottle for the current platform tag for the package and each dependency,
resolves its sha256 (explicitly or from a content-addressed URL), and
materializes it into the local cache under a deterministic filename.
"""

__version__ = "0.1.0"

from bottlefetch.core.cache import BottleCache
from bottlefetch.core.orchestrator import Pipeline

__all__ = ["BottleCache", "Pipeline", "__version__"]
