"""Live tmux snapshots: pollers, throttle and the store dispatcher.

PUBLIC API:
  - Watcher: Background pollers with a bounded event stream
  - Event: One poll outcome
  - Kind: Snapshot kind of an event
  - Dispatcher: Applies events to stores
  - Result: Which stores an event changed
  - Throttle: Minimum-interval gate
"""

from .throttle import Throttle
from .watcher import Event, Kind, Watcher
from .dispatcher import Dispatcher, Result

__all__ = ["Watcher", "Event", "Kind", "Dispatcher", "Result", "Throttle"]
