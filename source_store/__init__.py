"""source-store: data access for the ``source`` table."""

__version__ = "0.1.0"
