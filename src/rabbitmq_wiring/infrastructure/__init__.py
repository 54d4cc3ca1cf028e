"""Infrastructure layer exports."""

from rabbitmq_wiring.infrastructure.interfaces import MessageHandler

__all__ = [
    "MessageHandler",
]
