"""
Business logic services
"""
from . import habits

__all__ = [
    'habits'
]
