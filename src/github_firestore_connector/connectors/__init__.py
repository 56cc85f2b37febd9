"""Output connectors for transformed records."""

from .base import OutputConnector
from .json_file import JsonFileOutputConnector

__all__ = ["JsonFileOutputConnector", "OutputConnector"]
