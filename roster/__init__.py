"""Community roster core: access resolution and member lifecycle."""

__version__ = "0.1.0"
