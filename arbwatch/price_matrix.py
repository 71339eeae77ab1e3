"""A thread-safe table of latest prices per exchange and token."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Optional

from .market_data import ExchangeName, Token

_ARB_THRESHOLD = 0.001
_MIN_SEED = 1_000_000_000.0


@dataclass(frozen=True)
class ArbOpportunity:
    """A same-side price gap for one token between two exchanges."""

    token: Token
    spread: float
    low_exchange: ExchangeName
    high_exchange: ExchangeName
    low_price: float
    high_price: float

    def __str__(self) -> str:
        return (
            f"Found ARB! {self.spread!r} {self.low_exchange} {self.high_exchange} "
            f"{self.token} {self.low_price!r} {self.high_price!r}"
        )


def _is_positive_zero(price: float) -> bool:
    return price == 0.0 and math.copysign(1.0, price) > 0


class PriceMatrix:
    """Latest price for every (exchange, token) pair.

    A stored price of positive zero means "no price", as with an unset cell.
    """

    def __init__(self) -> None:
        self._prices: dict[tuple[ExchangeName, Token], float] = {}
        self._lock = threading.Lock()

    def update(self, exchange: ExchangeName, token: Token, price: float) -> None:
        key = (exchange, token)
        with self._lock:
            if _is_positive_zero(price):
                self._prices.pop(key, None)
            else:
                self._prices[key] = price

    def get(self, exchange: ExchangeName, token: Token) -> Optional[float]:
        with self._lock:
            return self._prices.get((exchange, token))

    def prices(self, token: Token) -> list[Optional[tuple[float, ExchangeName]]]:
        """One entry per exchange, in exchange order: ``(price, exchange)`` or None."""
        with self._lock:
            snapshot = {exchange: self._prices.get((exchange, token)) for exchange in ExchangeName}
        return [
            None if price is None else (price, exchange)
            for exchange, price in snapshot.items()
        ]

    def format(self, name: str) -> str:
        lines = [f"{name} PRICES:"]
        for exchange in ExchangeName:
            for token in Token:
                price = self.get(exchange, token)
                if price is not None:
                    lines.append(f"{exchange} {token}: ${price:.2f}")
        return "\n".join(lines) + "\n\n"

    def print_matrix(self, name: str) -> None:
        print(self.format(name), end="")

    def find_arb_ops(self) -> list[ArbOpportunity]:
        """Tokens whose highest and lowest prices differ by more than 0.1%."""
        found = []
        for token in Token:
            min_price, min_exchange = _MIN_SEED, ExchangeName.COINBASE
            max_price, max_exchange = 0.0, ExchangeName.COINBASE
            for entry in self.prices(token):
                if entry is None:
                    continue
                price, exchange = entry
                if price < min_price:
                    min_price, min_exchange = price, exchange
                if price > max_price:
                    max_price, max_exchange = price, exchange
            spread = (max_price - min_price) / min_price if min_price else math.inf
            if spread > _ARB_THRESHOLD:
                found.append(
                    ArbOpportunity(token, spread, min_exchange, max_exchange, min_price, max_price)
                )
        return found

    def report_arb_ops(self) -> list[ArbOpportunity]:
        """Print every opportunity found and return them."""
        found = self.find_arb_ops()
        for opportunity in found:
            print(opportunity)
        return found