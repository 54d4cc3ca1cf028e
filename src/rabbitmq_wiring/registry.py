"""Registration of exchanges and message handlers before traffic flows."""

import logging
import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rabbitmq_wiring.config import ExchangeOptions
from rabbitmq_wiring.exceptions import DuplicateExchangeError, InvalidHandlerError
from rabbitmq_wiring.infrastructure.interfaces import MessageHandler

logger = logging.getLogger(__name__)

HandlerLifetime = Literal["transient", "singleton"]


class Exchange(BaseModel, frozen=True):
    """A named exchange and the options it is declared with."""

    name: str
    options: ExchangeOptions = Field(default_factory=ExchangeOptions)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Exchange name must not be empty")
        return value


class HandlerBinding(BaseModel):
    """A handler type and the routing keys it receives, in order."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    handler_type: type[MessageHandler]
    routing_keys: tuple[str, ...]
    lifetime: HandlerLifetime = "transient"


class RegistrationRegistry:
    """
    Collects exchange declarations and handler bindings during setup.

    Exchange names are unique, compared case-insensitively. Handler bindings
    fan out per routing key in registration order; registering the same
    handler for the same key twice yields two entries.

    Mutation is expected to happen single-threaded at startup. Read methods
    return immutable values, so dispatch workers can share the registry once
    setup is over.
    """

    def __init__(self):
        self._exchanges: dict[str, Exchange] = {}
        self._handlers: dict[str, list[type[MessageHandler]]] = {}
        self._bindings: list[HandlerBinding] = []
        self._lifetimes: dict[type[MessageHandler], HandlerLifetime] = {}
        self._singletons: dict[type[MessageHandler], MessageHandler] = {}
        self._singleton_lock = threading.Lock()

    @staticmethod
    def _normalize(name: str) -> str:
        return name.lower()

    def declare_exchange(
        self,
        name: str,
        options: ExchangeOptions | Mapping[str, Any] | None = None,
    ) -> Exchange:
        """
        Registers an exchange under ``name``.

        Args:
            name: The exchange name.
            options: Exchange options, a mapping bound from configuration, or
                None for defaults.

        Returns:
            The registered exchange.

        Raises:
            DuplicateExchangeError: If the name is already declared, whatever
                the options.
            ValueError: If the name is empty or the options are invalid.
        """
        key = self._normalize(name)
        if key in self._exchanges:
            logger.error(
                "Duplicate exchange declaration",
                extra={
                    "exchange": name,
                    "existing_exchange": self._exchanges[key].name,
                },
            )
            raise DuplicateExchangeError(name)

        if options is None:
            options = ExchangeOptions()
        elif not isinstance(options, ExchangeOptions):
            options = ExchangeOptions.model_validate(options)

        exchange = Exchange(name=name, options=options)
        self._exchanges[key] = exchange
        logger.info(
            "Exchange registered",
            extra={"exchange": name, "exchange_type": options.type},
        )
        return exchange

    def register_handler(
        self,
        handler_type: type[MessageHandler],
        routing_keys: str | Iterable[str],
        lifetime: HandlerLifetime = "transient",
    ) -> HandlerBinding:
        """
        Binds ``handler_type`` to one or more routing keys.

        A single key and an iterable of keys behave the same as calling once
        per key, in the given order. Duplicates are kept.

        Raises:
            InvalidHandlerError: If ``handler_type`` is not a MessageHandler
                subclass.
        """
        is_handler = isinstance(handler_type, type) and issubclass(
            handler_type, MessageHandler
        )
        if not is_handler:
            raise InvalidHandlerError(handler_type)

        if isinstance(routing_keys, str):
            routing_keys = [routing_keys]
        keys = tuple(routing_keys)

        binding = HandlerBinding(
            handler_type=handler_type, routing_keys=keys, lifetime=lifetime
        )
        self._bindings.append(binding)
        # Last registration decides how the type is instantiated.
        self._lifetimes[handler_type] = lifetime
        for key in keys:
            self._handlers.setdefault(key, []).append(handler_type)

        logger.info(
            "Message handler registered",
            extra={
                "handler": handler_type.__name__,
                "routing_keys": list(keys),
                "lifetime": lifetime,
            },
        )
        return binding

    def register_transient_handler(
        self, handler_type: type[MessageHandler], routing_keys: str | Iterable[str]
    ) -> HandlerBinding:
        return self.register_handler(handler_type, routing_keys, "transient")

    def register_singleton_handler(
        self, handler_type: type[MessageHandler], routing_keys: str | Iterable[str]
    ) -> HandlerBinding:
        return self.register_handler(handler_type, routing_keys, "singleton")

    def resolve_handlers(self, routing_key: str) -> tuple[type[MessageHandler], ...]:
        """Returns the handler types bound to ``routing_key``, in order."""
        return tuple(self._handlers.get(routing_key, ()))

    def create_handlers(self, routing_key: str) -> list[MessageHandler]:
        """
        Instantiates the handlers bound to ``routing_key``.

        Singleton handler types share one instance across calls; transient
        ones are created fresh each time.
        """
        handlers = []
        for handler_type in self.resolve_handlers(routing_key):
            if self._lifetimes[handler_type] == "singleton":
                with self._singleton_lock:
                    if handler_type not in self._singletons:
                        self._singletons[handler_type] = handler_type()
                handlers.append(self._singletons[handler_type])
            else:
                handlers.append(handler_type())
        return handlers

    def list_exchanges(self) -> tuple[Exchange, ...]:
        """Returns the declared exchanges in declaration order."""
        return tuple(self._exchanges.values())

    def get_exchange(self, name: str) -> Exchange | None:
        return self._exchanges.get(self._normalize(name))

    @property
    def bindings(self) -> tuple[HandlerBinding, ...]:
        return tuple(self._bindings)

    @property
    def routing_keys(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def routing_table(self) -> Mapping[str, tuple[type[MessageHandler], ...]]:
        """Returns a read-only snapshot of routing key to handler types."""
        return MappingProxyType(
            {key: tuple(handlers) for key, handlers in self._handlers.items()}
        )
