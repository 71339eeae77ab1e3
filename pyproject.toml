[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arbwatch"
version = "0.1.0"
description = "Watch live book tickers from Binance and Coinbase and report cross-exchange price gaps"
requires-python = ">=3.10"
keywords = ["crypto", "arbitrage", "websocket", "book-ticker", "market-data"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "websockets",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
arbwatch = "arbwatch.app:main"

[tool.hatch.build.targets.wheel]
packages = ["arbwatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
