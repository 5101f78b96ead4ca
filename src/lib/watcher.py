"""
File watcher

Watches a fixed set of files with watchdog and surfaces modifications as
an async stream of ChangeEvents. watchdog watches directories, so each
file's parent directory is scheduled and events are filtered down to the
watched paths. Events are handed from the observer thread to the event
loop with call_soon_threadsafe.

Bursts (an editor's atomic save, truncate-then-write) are coalesced: after
an event the stream waits for a quiet period of ``debounce`` seconds and
yields one event for the burst.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Iterable, Optional, Set

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .errors import DeckIOError
from .log import LOG


OBSERVER_CHECK_INTERVAL = 1.0

@dataclass(frozen=True)
class ChangeEvent:
    """A watched file was modified"""
    path: Path


class WatchedFilesHandler(FileSystemEventHandler):
    """Forwards events on watched files to the event loop"""

    def __init__(self, paths: Set[Path], loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue[ChangeEvent]"):
        self.paths = paths
        self.loop = loop
        self.queue = queue

    def _forward(self, src: str) -> None:
        path = Path(src).resolve()
        if path in self.paths:
            self.loop.call_soon_threadsafe(self.queue.put_nowait, ChangeEvent(path))

    def on_modified(self, event: FileSystemEvent) -> None:
        if isinstance(event, FileModifiedEvent):
            self._forward(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if isinstance(event, FileCreatedEvent):
            self._forward(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Atomic saves rename a temporary file over the watched one
        if isinstance(event, FileMovedEvent):
            self._forward(event.dest_path)


class FileWatcher:
    """
    Watches files for modification.

    Usage:
        watcher = FileWatcher([input_path, css_path], debounce=0.25)
        watcher.start()
        try:
            async for event in watcher.events():
                ...
        finally:
            watcher.stop()
    """

    def __init__(self, paths: Iterable[Path], debounce: float = 0.0) -> None:
        self.paths: Set[Path] = {Path(p).resolve() for p in paths}
        self.debounce = debounce
        self._queue: "asyncio.Queue[ChangeEvent]" = asyncio.Queue()
        self._observer: Optional[Observer] = None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Begin watching. Must be called from (or given) the consuming event loop.

        Raises:
            DeckIOError: If any path does not exist or cannot be watched
        """
        loop = loop or asyncio.get_running_loop()
        for path in self.paths:
            if not path.is_file():
                raise DeckIOError(path, FileNotFoundError(2, "No such file to watch"))

        handler = WatchedFilesHandler(self.paths, loop, self._queue)
        observer = Observer()
        try:
            for directory in sorted({p.parent for p in self.paths}):
                observer.schedule(handler, str(directory), recursive=False)
                LOG(f"Watching {directory}", level=2)
            observer.start()
        except OSError as e:
            observer.stop()
            raise DeckIOError(None, e)
        self._observer = observer

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=2)
            self._observer = None

    async def _event_next(self) -> ChangeEvent:
        while True:
            try:
                return await asyncio.wait_for(self._queue.get(), OBSERVER_CHECK_INTERVAL)
            except asyncio.TimeoutError:
                if self._observer is None or not self._observer.is_alive():
                    raise DeckIOError(None, OSError("file watcher stopped"))

    async def events(self) -> AsyncIterator[ChangeEvent]:
        """
        Infinite stream of coalesced change events.

        Raises:
            DeckIOError: If the observer thread dies while the stream is consumed
        """
        while True:
            event = await self._event_next()
            if self.debounce > 0:
                while True:
                    try:
                        event = await asyncio.wait_for(self._queue.get(), self.debounce)
                    except asyncio.TimeoutError:
                        break
            LOG(f"Change detected: {event.path}", level=1)
            yield event
