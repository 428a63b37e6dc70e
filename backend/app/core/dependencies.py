"""
Dependency injection for shared clients and resources
"""
from functools import lru_cache
from supabase import create_client, Client
from app.core.config import settings
from app.services.habits.repository import HabitStore, EventStore
from app.services.habits.ordering import OrderingManager
from app.services.habits.completions import CompletionAggregator


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Get Supabase client instance (created on first use)"""
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def get_habit_store() -> HabitStore:
    """Get the habits table store"""
    return HabitStore(get_supabase_client(), settings.HABITS_TABLE)


def get_event_store() -> EventStore:
    """Get the completion events table store"""
    return EventStore(get_supabase_client(), settings.COMPLETIONS_TABLE)


def get_ordering_manager() -> OrderingManager:
    """Get an ordering manager bound to the configured habit store"""
    return OrderingManager(get_habit_store())


def get_completion_aggregator() -> CompletionAggregator:
    """Get a completion aggregator bound to the configured stores"""
    return CompletionAggregator(get_habit_store(), get_event_store())
