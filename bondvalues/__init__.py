"""Daily values of retail treasury bonds read from an XLS workbook, and an HTTP API serving them."""

__version__ = "0.1.0"