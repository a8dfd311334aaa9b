from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Iterable, List

ORDER_CREATED = "order.created"
ORDER_PAID = "order.paid"
ORDER_STATUS_CHANGED = "order.status.changed"
ORDER_EVENTS = frozenset({ORDER_CREATED, ORDER_PAID, ORDER_STATUS_CHANGED})

OrderEventHandler = Callable[[dict[str, Any]], None]

logger = logging.getLogger(__name__)


class UnknownOrderEvent(ValueError):
    pass


class OrderEventBus:
    """Dispatches order lifecycle events to notification handlers.

    Handlers run one after the other; a failing handler is logged with the
    order it was handling and never stops the remaining ones.
    """

    def __init__(self, event_names: Iterable[str] = ORDER_EVENTS) -> None:
        self._event_names = frozenset(event_names)
        self._handlers: DefaultDict[str, List[OrderEventHandler]] = defaultdict(list)

    def _check(self, event_name: str) -> None:
        if event_name not in self._event_names:
            raise UnknownOrderEvent(f"Unknown order event: {event_name}")

    def subscribe(self, event_name: str, handler: OrderEventHandler) -> None:
        self._check(event_name)
        self._handlers[event_name].append(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> int:
        """Run every handler for ``event_name``; returns how many failed."""
        self._check(event_name)
        order_id = payload.get("order_id")
        handlers = list(self._handlers.get(event_name, []))
        if not handlers:
            logger.debug("No handlers for %s order_id=%s", event_name, order_id)
            return 0

        failures = 0
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                failures += 1
                logger.exception(
                    "Order event handler %s failed event=%s order_id=%s",
                    getattr(handler, "__name__", repr(handler)),
                    event_name,
                    order_id,
                    extra={"order_id": order_id},
                )
        logger.info(
            "Order event %s dispatched order_id=%s handlers=%s failures=%s",
            event_name,
            order_id,
            len(handlers),
            failures,
            extra={"order_id": order_id},
        )
        return failures


event_bus = OrderEventBus()
