"""Sample-Bank: tutorial REST service with an API capability query engine."""

__version__ = "0.1.0"
