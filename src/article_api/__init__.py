"""Article CRUD service with a companion schema migration runner."""

__version__ = "0.1.0"
