"""Хранилища: календарь публикаций и профили проспекции"""
from content_scheduler.store.base import ScheduleStore, ProspectStore
from content_scheduler.store.memory import InMemoryScheduleStore, InMemoryProspectStore
from content_scheduler.store.supabase import SupabaseClient, SupabaseScheduleStore, SupabaseProspectStore

__all__ = [
    "ScheduleStore",
    "ProspectStore",
    "InMemoryScheduleStore",
    "InMemoryProspectStore",
    "SupabaseClient",
    "SupabaseScheduleStore",
    "SupabaseProspectStore"
]
