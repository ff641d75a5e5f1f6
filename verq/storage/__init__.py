"""
Document storage backends.
"""
from .document_store import DocumentStore, InMemoryStore, JSONFileStore

__all__ = ['DocumentStore', 'InMemoryStore', 'JSONFileStore']
