"""
Watching Context

Responsibilities:
- Probes for an installed filesystem watch utility
- Filters change events down to source files
- Triggers a rebuild of the affected folder for each relevant change

Owns: Watch providers, the rebuild loop
Never: Compiles anything itself (delegates to the rendering context)
"""

from texdock.contexts.watching.providers import (
    DEFAULT_PROVIDERS,
    FswatchProvider,
    InotifywaitProvider,
    WatchProvider,
    select_provider,
)
from texdock.contexts.watching.watcher import Watcher

__all__ = [
    "DEFAULT_PROVIDERS",
    "FswatchProvider",
    "InotifywaitProvider",
    "WatchProvider",
    "Watcher",
    "select_provider",
]
