"""Abstract interface for message handlers bound to routing keys."""

from abc import ABC, abstractmethod


class MessageHandler(ABC):
    """Abstract base class for handlers that process delivered messages."""

    @abstractmethod
    def handle(self, message: bytes, routing_key: str) -> None:
        """
        Processes a single message delivered for a bound routing key.

        Args:
            message: The raw message body.
            routing_key: The routing key the message was published with.
        """
