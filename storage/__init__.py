from flask import current_app

from storage.base import Storage
from storage.memory import MemStorage
from storage.sql import SQLStorage


def create_storage(backend):
    if backend == "memory":
        return MemStorage()
    if backend == "sql":
        return SQLStorage()
    raise ValueError(f"Unknown storage backend: {backend!r}")


def get_storage():
    return current_app.extensions["storage"]


__all__ = ["Storage", "MemStorage", "SQLStorage", "create_storage", "get_storage"]
