"""
Habits module - Ordering and completion engine
"""
from . import repository
from . import ordering
from . import completions
from . import locks

from .repository import HabitStore, EventStore
from .ordering import OrderingManager
from .completions import CompletionAggregator, existed_on

__all__ = [
    # Modules
    'repository',
    'ordering',
    'completions',
    'locks',

    # Stores
    'HabitStore',
    'EventStore',

    # Engine
    'OrderingManager',
    'CompletionAggregator',
    'existed_on'
]
