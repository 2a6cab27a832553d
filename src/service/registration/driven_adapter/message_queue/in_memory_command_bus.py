"""
In-memory Command Bus Implementation

Stands in for the durable command bus in local runs and tests.

Architecture:
- Use Case -> send() -> encode envelope -> every subscriber stream
- Each subscriber gets its own bounded anyio memory stream
- The most recent sent envelopes are kept in order for inspection
  (bounded, oldest evicted first)

Delivery:
- Stream max buffer: 100 envelopes
- Drop policy: a full subscriber stream drops the envelope with a warning
  (send_nowait raises WouldBlock), the send itself still succeeds
"""

from collections import deque
from typing import Deque, List, Sequence

from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.exception.exceptions import CommandDispatchError
from src.platform.logging.loguru_io import Logger
from src.service.registration.app.interface.i_command_dispatcher import ICommandDispatcher
from src.service.registration.domain.command.registration_command import Command
from src.service.registration.driven_adapter.message_queue.command_codec import CommandCodec


class InMemoryCommandBus(ICommandDispatcher):
    def __init__(self, *, max_buffer_size: int = 100, retained_envelopes: int = 1000) -> None:
        self._max_buffer_size = max_buffer_size
        self._subscribers: List[tuple[MemoryObjectSendStream[bytes], MemoryObjectReceiveStream[bytes]]] = []
        # Only the most recent envelopes are kept for inspection
        self._sent: Deque[bytes] = deque(maxlen=retained_envelopes)
        self._closed = False

    @property
    def sent(self) -> List[bytes]:
        return list(self._sent)

    def sent_commands(self) -> List[Command]:
        return [CommandCodec.decode(envelope) for envelope in self._sent]

    def subscribe(self) -> MemoryObjectReceiveStream[bytes]:
        """
        Register a new subscriber

        Returns:
            MemoryObjectReceiveStream yielding encoded envelopes sent after this call
        """
        send_stream, receive_stream = create_memory_object_stream[bytes](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.append((send_stream, receive_stream))
        Logger.base.debug(f'📡 [BUS] Subscribed (total subscribers: {len(self._subscribers)})')
        return receive_stream

    async def unsubscribe(self, *, stream: MemoryObjectReceiveStream[bytes]) -> None:
        for i, (send_stream, receive_stream) in enumerate(self._subscribers):
            if receive_stream is stream:
                await send_stream.aclose()
                await receive_stream.aclose()
                self._subscribers.pop(i)
                Logger.base.debug(
                    f'📡 [BUS] Unsubscribed (remaining: {len(self._subscribers)})'
                )
                break

    async def send(self, command: Command) -> None:
        if self._closed:
            raise CommandDispatchError(
                f'Command bus is closed, cannot send {type(command).__name__}'
            )

        envelope = CommandCodec.encode(command)
        self._sent.append(envelope)

        delivered = 0
        dropped = 0
        for send_stream, _ in self._subscribers:
            try:
                send_stream.send_nowait(envelope)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(
                    f'⚠️ [BUS] Subscriber stream full, dropping {type(command).__name__} '
                    f'{command.id}'
                )
            except (BrokenResourceError, ClosedResourceError):
                dropped += 1

        Logger.base.debug(
            f'📤 [BUS] Sent {type(command).__name__} {command.id}: '
            f'delivered={delivered}, dropped={dropped}'
        )

    async def send_batch(self, commands: Sequence[Command]) -> None:
        for command in commands:
            await self.send(command)

    async def close(self) -> None:
        self._closed = True
        for send_stream, _ in self._subscribers:
            await send_stream.aclose()
        self._subscribers.clear()
        Logger.base.info('🛑 [BUS] Command bus closed')
