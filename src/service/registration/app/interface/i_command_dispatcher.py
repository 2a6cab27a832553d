"""
Command Dispatcher Interface

Use cases hand commands to this port and move on. A send returns once the
bus has accepted the command, not once it has been applied.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from src.service.registration.domain.command.registration_command import Command


class ICommandDispatcher(ABC):
    @abstractmethod
    async def send(self, command: Command) -> None:
        """
        Accept one command for asynchronous processing.

        Raises:
            CommandDispatchError: If the bus refuses the command
        """
        pass

    @abstractmethod
    async def send_batch(self, commands: Sequence[Command]) -> None:
        """
        Accept several commands, in order.

        A batch is not a transaction: each command is delivered and applied
        independently, and read models may observe them in any order.
        """
        pass
