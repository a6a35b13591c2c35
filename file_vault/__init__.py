"""
file_vault package initializer.
"""

from . import credentials
from . import paths
from . import responder

__all__ = ["credentials", "paths", "responder"]
