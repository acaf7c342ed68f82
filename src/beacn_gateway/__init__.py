"""Local REST gateway for the Beacn Mic LED ring."""

__version__ = "0.1.0"
