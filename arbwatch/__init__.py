"""Cross-exchange best bid/ask watcher for Binance and Coinbase."""

__version__ = "0.1.0"
__all__ = ["__version__"]