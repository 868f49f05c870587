"""
Exception types raised by er_sketch
"""
from typing import Optional, Tuple


class ErSketchError(Exception):
    """Base class for all er_sketch errors"""


class UnknownTableError(ErSketchError, KeyError):
    """A relationship points at a table that was never declared"""

    def __init__(self, table: str, relationship: Optional[Tuple[str, str]] = None):
        self.table = table
        self.relationship = relationship
        if relationship:
            message = (f"unknown table reference '{table}' in relationship "
                       f"{relationship[0]} -> {relationship[1]}")
        else:
            message = f"unknown table reference '{table}'"
        super().__init__(message)

    def __str__(self):
        # KeyError would wrap the message in quotes
        return self.args[0]


class SchemaParseError(ErSketchError, ValueError):
    """DDL text could not be turned into any table"""


class ConfigError(ErSketchError, ValueError):
    """An environment setting holds a value of the wrong shape"""
