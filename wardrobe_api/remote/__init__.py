from wardrobe_api.remote.base import RemoteService
from wardrobe_api.remote.in_memory import InMemoryRemote
from wardrobe_api.remote.supabase import SupabaseRemote

__all__ = ["RemoteService", "InMemoryRemote", "SupabaseRemote"]
