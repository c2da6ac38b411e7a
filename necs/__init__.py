"""A node-based entity component store for games: node declaration, storage and worlds."""

__version__ = "0.1.0"