"""Custom exceptions for the RabbitMQ client wiring."""


class DuplicateExchangeError(ValueError):
    """Raised when an exchange name (case-insensitive) is declared twice."""

    def __init__(self, exchange_name: str):
        self.exchange_name = exchange_name
        super().__init__(f"Exchange '{exchange_name}' has already been added")


class InvalidHandlerError(TypeError):
    """Raised when a registered handler type is not a MessageHandler."""

    def __init__(self, handler_type: object):
        self.handler_type = handler_type
        super().__init__(f"'{handler_type!r}' is not a MessageHandler subclass")
