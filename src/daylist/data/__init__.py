"""
Data management submodule: file I/O, schema checks, persistence gateways and the application context.
"""

from .core import DataCore, DaylistContext
from .gateway import PersistenceGateway, JsonFileGateway, MemoryGateway

__all__ = [
    'DataCore',
    'DaylistContext',
    'PersistenceGateway',
    'JsonFileGateway',
    'MemoryGateway',
]
