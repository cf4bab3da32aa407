"""Shared resources processes synchronize on."""

from .store import PutRequest, Store, create_store, get, put

__all__ = ["PutRequest", "Store", "create_store", "get", "put"]
