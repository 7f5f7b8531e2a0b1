from abc import ABC, abstractmethod

from flask import current_app

EXTENSION_KEY = "pizzatracker.store"


class Store(ABC):

    @abstractmethod
    def load(self):
        """Return the current AppData, seeding the default catalog if none exists."""
        raise NotImplementedError

    @abstractmethod
    def upsert_order(self, order):
        """Replace the order with the same number, keeping its id, or append it."""
        raise NotImplementedError

    @abstractmethod
    def delete_order(self, number):
        raise NotImplementedError

    @abstractmethod
    def cycle_order_status(self, number):
        raise NotImplementedError

    @abstractmethod
    def add_flavor(self, name):
        raise NotImplementedError

    @abstractmethod
    def remove_flavor(self, flavor_id):
        raise NotImplementedError


def make_store(config):
    """Build the backend named by ``config["STORAGE_BACKEND"]``."""
    backend = config.get("STORAGE_BACKEND", "local")
    if backend == "local":
        from .local import LocalStore
        return LocalStore(config["LOCAL_STORAGE_DIR"])
    if backend == "remote":
        from .remote import RemoteStore
        from .. import db
        return RemoteStore(db)
    raise ValueError(f"unknown storage backend: {backend!r}")


def get_store():
    return current_app.extensions[EXTENSION_KEY]
