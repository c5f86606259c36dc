"""TuneSearch - YouTube music search proxy and terminal client."""

__version__ = "1.0.0"
