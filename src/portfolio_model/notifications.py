# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Multicast price notification channel.

Each asset owns two channels, ``on_price_update`` and ``on_critical_drop``.
Handlers receive ``(symbol, price, message)``.
"""

from typing import Callable, List

PriceHandler = Callable[[str, float, str], None]


class PriceChannel:
    """Ordered list of subscribers invoked on every qualifying price change.

    Dispatch iterates over a snapshot of the subscriber list, so a handler may
    subscribe or unsubscribe (itself or others) without affecting the pass in
    progress. Handler exceptions are not caught.

    Example:
        >>> channel = PriceChannel()
        >>> channel += lambda symbol, price, msg: print(symbol, price, msg)
        >>> channel.dispatch("BTC", 41000.0, "Price dropped by $9,000.00")
        BTC 41000.0 Price dropped by $9,000.00
    """

    def __init__(self):
        self._handlers: List[PriceHandler] = []

    def subscribe(self, handler: PriceHandler) -> PriceHandler:
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: PriceHandler) -> bool:
        """Remove the most recent registration of handler. Returns False if absent."""
        for idx in range(len(self._handlers) - 1, -1, -1):
            if self._handlers[idx] == handler:
                del self._handlers[idx]
                return True
        return False

    def dispatch(self, symbol: str, price: float, message: str) -> int:
        """Invoke every subscriber in order. Returns the number invoked."""
        snapshot = tuple(self._handlers)
        for handler in snapshot:
            handler(symbol, price, message)
        return len(snapshot)

    def clear(self):
        self._handlers.clear()

    def __iadd__(self, handler: PriceHandler) -> 'PriceChannel':
        self.subscribe(handler)
        return self

    def __isub__(self, handler: PriceHandler) -> 'PriceChannel':
        self.unsubscribe(handler)
        return self

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        return bool(self._handlers)

    def __repr__(self) -> str:
        return f"PriceChannel(subscribers={len(self._handlers)})"
