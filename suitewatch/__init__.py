"""suitewatch - trigger a remote test suite run and follow it to completion."""

__version__ = "0.1.0"
