"""Document store writers."""

from .base import DocumentWriter
from .factory import create_writer, open_writer
from .mongo_writer import MongoWriter
from .sqlite_writer import SQLiteWriter

__all__ = ["DocumentWriter", "MongoWriter", "SQLiteWriter", "create_writer", "open_writer"]
