"""Connection domain exports."""
from .entity import Connection
from .repository import ConnectionRepository

__all__ = ["Connection", "ConnectionRepository"]
