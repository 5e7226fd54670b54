"""Building blocks for an HTTP reverse proxy: names, messages, bodies, headers and responses."""

__version__ = "0.1.0"