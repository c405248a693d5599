"""Matching batch replies to the commands that produced them.

Reply i answers command i. A batch is a transport optimization, not a
transaction: one command failing on the server says nothing about its
neighbours, so per-command errors are kept as data and every reply is
returned.
"""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from centapi.protocol.base import Command, Reply, ReplyError
from centapi.shared.errors import LengthMismatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """One reply per submitted command, index for index."""

    commands: tuple[Command, ...]
    replies: tuple[Reply, ...]

    def __len__(self) -> int:
        return len(self.replies)

    def __iter__(self) -> Iterator[Reply]:
        return iter(self.replies)

    def __getitem__(self, index: int) -> Reply:
        return self.replies[index]

    def pairs(self) -> Iterator[tuple[Command, Reply]]:
        """Iterate over (command, reply) in submission order."""
        return zip(self.commands, self.replies, strict=True)

    @property
    def errors(self) -> list[tuple[int, ReplyError]]:
        """Server errors with the index of the command they belong to."""
        return [
            (index, reply.error)
            for index, reply in enumerate(self.replies)
            if reply.error is not None
        ]

    @property
    def ok(self) -> bool:
        """True if no command in the batch failed."""
        return all(reply.ok for reply in self.replies)


class ReplyCorrelator:
    def correlate(
        self, commands: Sequence[Command], replies: Sequence[Reply]
    ) -> BatchResult:
        """Pair submitted commands with the server's replies.

        Args:
            commands: Commands in the order they were sent
            replies: Parsed replies in the order they were received

        Returns:
            BatchResult with `len(commands)` replies

        Raises:
            LengthMismatchError: If the server answered a different number of
                commands than were sent. Never patched by padding or truncating.
        """
        if len(replies) != len(commands):
            raise LengthMismatchError(expected=len(commands), received=len(replies))

        result = BatchResult(commands=tuple(commands), replies=tuple(replies))
        failed = len(result.errors)
        if failed:
            logger.debug(f"Correlated {len(result)} replies, {failed} with errors")
        else:
            logger.debug(f"Correlated {len(result)} replies")
        return result
