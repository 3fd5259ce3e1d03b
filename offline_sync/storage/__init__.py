"""
Local storage backends for the pending queue.
"""
from offline_sync.storage.local_store import FileLocalStore, InMemoryLocalStore, LocalStore

__all__ = ['LocalStore', 'InMemoryLocalStore', 'FileLocalStore']
