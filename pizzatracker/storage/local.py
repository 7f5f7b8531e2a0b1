"""Single-device backend: the whole AppData serialized into one JSON slot."""
import dataclasses
import json
import logging
import os
from pathlib import Path

from . import Store
from ..domain import AppData, Flavor, coerce_number, generate_id, migrate_legacy, next_status, now_ms
from ..errors import WriteError

logger = logging.getLogger(__name__)

STORAGE_KEY = "pizza_tracker_db_v2"
LEGACY_STORAGE_KEY = "pizza_tracker_db_v1"

# unreadable file, bad JSON, or JSON of the wrong shape
_READ_ERRORS = (OSError, ValueError, TypeError, AttributeError)


class LocalStore(Store):
    """Key-value slots stored as ``<directory>/<key>.json``.

    Read-modify-write is not atomic across processes; one operator on one
    device is assumed.
    """

    def __init__(self, directory):
        self.directory = Path(directory)

    def _slot(self, key):
        return self.directory / f"{key}.json"

    def _get_item(self, key):
        path = self._slot(key)
        if not path.exists():
            return None
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)

    def _set_item(self, key, value):
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._slot(key)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(value, fh, ensure_ascii=False)
        os.replace(tmp, path)

    def _read(self):
        stored = self._get_item(STORAGE_KEY)
        if stored is not None:
            return AppData.from_dict(stored)

        legacy = self._get_item(LEGACY_STORAGE_KEY)
        if legacy is not None:
            migrated = migrate_legacy(legacy)
            self._set_item(STORAGE_KEY, migrated)
            logger.info("Migrated %d orders from %s", len(migrated["orders"]), LEGACY_STORAGE_KEY)
            return AppData.from_dict(migrated)

        data = AppData.seeded()
        self._set_item(STORAGE_KEY, data.to_dict())
        logger.info("Seeded %s with the default flavor catalog", STORAGE_KEY)
        return data

    def _commit(self, data):
        self._set_item(STORAGE_KEY, data.to_dict())
        return data

    def _mutate(self, action, change):
        try:
            return self._commit(change(self._read()))
        except _READ_ERRORS as exc:
            logger.error("Local %s failed", action, exc_info=True)
            raise WriteError(f"could not {action}: {exc}") from exc

    def load(self):
        try:
            return self._read()
        except _READ_ERRORS:
            logger.warning("Could not read local storage, continuing with empty data", exc_info=True)
            return AppData.empty()

    def upsert_order(self, order):
        order = dataclasses.replace(order, timestamp=now_ms())

        def change(data):
            wanted = coerce_number(order.number)
            for i, existing in enumerate(data.orders):
                if coerce_number(existing.number) == wanted:
                    order.id = existing.id
                    data.orders[i] = order
                    break
            else:
                if not order.id:
                    order.id = generate_id()
                data.orders.append(order)
            return data
        return self._mutate("save order", change)

    def delete_order(self, number):
        wanted = coerce_number(number)

        def change(data):
            data.orders = [o for o in data.orders if coerce_number(o.number) != wanted]
            return data
        return self._mutate("delete order", change)

    def cycle_order_status(self, number):
        def change(data):
            order = data.find_order(number)
            if order is not None:
                order.status = next_status(order.status)
            return data
        return self._mutate("change order status", change)

    def add_flavor(self, name):
        def change(data):
            data.flavors.append(Flavor(id=generate_id(), name=name))
            return data
        return self._mutate("add flavor", change)

    def remove_flavor(self, flavor_id):
        def change(data):
            data.flavors = [f for f in data.flavors if f.id != str(flavor_id)]
            return data
        return self._mutate("remove flavor", change)
