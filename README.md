# arbwatch

`arbwatch` connects to the public Binance and Coinbase websocket feeds, keeps
the latest best bid and best ask for each exchange and token, and reports when
the best bid for a token differs between the two exchanges by more than 0.1%.

Tokens tracked: BTC/USDT, ETH/USDT, ADA/USDT and LINK/USDT. Symbols arriving in
either exchange's style (`BTCUSDT` or `BTC-USDT`) map to the same `Token`;
symbols it does not know map to `Token.UNKNOWN`.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running

```
arbwatch
```

The command takes no options. It subscribes to both feeds, prints the `BID`
and `ASK` price tables at start-up and then every 20 seconds, and prints a line
starting with `Found ARB!` whenever the spread between the cheapest and dearest
exchange's best bid for a token goes over 0.1%. Feed connection errors and
frames that cannot be parsed are reported on standard error. Stop it with
Ctrl-C.

## Using it as a library

The parsing and price-table pieces can be used on their own:

```python
from arbwatch.market_data import BinanceBookTicker, ExchangeName, Token
from arbwatch.price_matrix import PriceMatrix

asks = PriceMatrix()
ticker = BinanceBookTicker.from_json(
    '{"s": "BTCUSDT", "a": "100.5", "b": "100.4", "A": "1.0", "B": "2.0"}'
)
for quote in ticker.ask_quotes():
    asks.update(quote.exchange, quote.token, quote.price)

asks.get(ExchangeName.BINANCE, Token.BTCUSDT)   # 100.5
asks.find_arb_ops()                            # list of ArbOpportunity
print(asks.format("ASK"))
```

`arbwatch.market_data` holds `ExchangeName`, `Token`, `Side`, `MarketQuote`,
and the payload types `BinanceBookTicker`, `CoinBaseBookTicker`,
`CoinBaseEvent` and `CoinBaseMessage`. Prices and quantities arrive as JSON
strings and are parsed to floats; `MarketDataError` is raised when a message is
not valid JSON or lacks a required field.

`arbwatch.price_matrix.PriceMatrix` keeps one price per (exchange, token) pair
behind a lock. Storing a price of `0.0` clears the cell. `prices(token)` gives
one `(price, exchange)` entry or `None` per exchange, `find_arb_ops()` returns
an `ArbOpportunity` for each token whose spread exceeds 0.1%, and
`report_arb_ops()` prints and returns them.

`arbwatch.app` has the subscription messages (`binance_subscribe_message`,
`coinbase_subscribe_message`), the message handlers (`handle_binance_message`,
`handle_coinbase_message`, which ignore trade frames and return the quotes they
applied), and the async tasks (`run_binance`, `run_coinbase`, `print_loop`,
`arb_loop`) that `run()` puts together.

## What it does not do

- It places no orders and connects to no account; it only reads public feeds.
- Gaps are compared on one side of the book only, and the running command
  scans only the bid table, so a gap is not an executable buy-low/sell-high
  trade.
- Prices live in memory only; nothing is stored between runs.
- A feed that disconnects is not reconnected.