"""
Registry of open push connections

Each websocket connection owns an unbounded outbound Channel; the
registry maps connection ids to channels. A single asyncio lock guards
membership changes and the broadcast snapshot; sending happens outside
the lock.
"""

import asyncio
import itertools
from typing import AsyncIterator, Dict, List, Optional, Tuple

from .log import LOG, logger


class ChannelClosedError(Exception):
    """Raised when sending on a closed channel"""
    pass


class Channel:
    """
    Unbounded, ordered, single-consumer message queue.

    The sending side belongs to the registry; the writer task of the
    connection drains it with ``async for``. Closing wakes the writer,
    which then stops.
    """

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self.closed = False

    def send(self, message: str) -> None:
        if self.closed:
            raise ChannelClosedError("channel is closed")
        self._queue.put_nowait(message)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(None)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            message = await self._queue.get()
            if message is None:
                return
            yield message


class ConnectionRegistry:
    """
    Concurrent map from connection id to outbound channel.

    Ids are process-wide for this registry instance, start at 1, increase
    monotonically and are never reused.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._channels: Dict[int, Channel] = {}
        self._lock = asyncio.Lock()

    async def connection_register(self) -> Tuple[int, Channel]:
        """Allocate the next id and a fresh channel for a new connection"""
        channel = Channel()
        async with self._lock:
            connection_id = next(self._ids)
            self._channels[connection_id] = channel
        LOG(f"Connection {connection_id} registered", level=2)
        return connection_id, channel

    async def connection_unregister(self, connection_id: int) -> None:
        """Remove and close a connection's channel; unknown ids are ignored"""
        async with self._lock:
            channel = self._channels.pop(connection_id, None)
        if channel is not None:
            channel.close()
            LOG(f"Connection {connection_id} unregistered", level=2)

    async def message_broadcast(self, message: str) -> int:
        """
        Send a message to every registered connection.

        Best effort: a failed send is logged and left to that connection's
        own disconnect path. Never raises.

        Returns:
            Number of channels the message was queued on
        """
        async with self._lock:
            snapshot: List[Tuple[int, Channel]] = list(self._channels.items())

        delivered = 0
        for connection_id, channel in snapshot:
            try:
                channel.send(message)
                delivered += 1
                LOG(f"Queued message for connection {connection_id}", level=3)
            except ChannelClosedError as e:
                logger.error(f"Failed to queue message for connection {connection_id}: {e}")
        return delivered

    def connections_count(self) -> int:
        return len(self._channels)

    def connectionIds_get(self) -> List[int]:
        return sorted(self._channels)
