"""Core math components"""
from . import transforms

__all__ = [
    "transforms",
]
