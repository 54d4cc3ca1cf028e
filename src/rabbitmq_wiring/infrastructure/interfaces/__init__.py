from rabbitmq_wiring.infrastructure.interfaces.message_handler import MessageHandler

__all__ = [
    "MessageHandler",
]
