"""
Application controller: view state, role, the order being edited and the
last AppData snapshot returned by the store.

Handlers call exactly one store operation and replace the snapshot with what
it returns; they never patch the snapshot themselves. Role checks here are a
convenience for the presentation layer, the store itself does not enforce
them.
"""
import logging
from enum import Enum
from functools import wraps

from flask import current_app, session

from .domain import Order, Role, coerce_number, range_for
from .errors import OrderNotFound, PermissionDenied, ValidationError
from .stats import compute_stats
from .storage import get_store

logger = logging.getLogger(__name__)

SESSION_KEY = "controller"


class View(str, Enum):
    DASHBOARD = "DASHBOARD"
    RANGES = "RANGES"
    ENTRY = "ENTRY"
    SETTINGS = "SETTINGS"


def admin_only(f):
    @wraps(f)
    def decorated(self, *args, **kwargs):
        if self.role != Role.ADMIN:
            logger.info("Refused %s for role %s", f.__name__, self.role.value)
            raise PermissionDenied(f"{f.__name__} requires the ADMIN role")
        return f(self, *args, **kwargs)
    return decorated


class AppController:

    def __init__(self, store, view=View.DASHBOARD, role=Role.ADMIN, editing=None):
        self.store = store
        self.view = View(view)
        self.role = Role(role)
        self.editing = editing
        self.data = None

    @property
    def is_loading(self):
        return self.data is None

    def load(self):
        self.data = self.store.load()
        return self.data

    def snapshot(self):
        """The cached AppData, loading it on first use."""
        if self.data is None:
            self.load()
        return self.data

    # Store-backed handlers

    @admin_only
    def save_order(self, order):
        if self.editing is not None:
            if coerce_number(order.number) != coerce_number(self.editing.number):
                raise ValidationError("the number of an existing order cannot change")
            order.id = self.editing.id
        self.data = self.store.upsert_order(order)
        if self.editing is not None:
            self.editing = None
            self.view = View.RANGES
        return self.data

    @admin_only
    def cycle_status(self, number):
        self.data = self.store.cycle_order_status(number)
        return self.data

    @admin_only
    def delete_order(self, number):
        self.data = self.store.delete_order(number)
        return self.data

    @admin_only
    def add_flavor(self, name):
        name = (name or "").strip()
        if not name:
            raise ValidationError("flavor name is required")
        self.data = self.store.add_flavor(name)
        return self.data

    @admin_only
    def remove_flavor(self, flavor_id):
        self.data = self.store.remove_flavor(flavor_id)
        return self.data

    # Navigation

    @admin_only
    def begin_edit(self, number):
        order = self.snapshot().find_order(number)
        if order is None:
            raise OrderNotFound(number)
        self.editing = order
        self.view = View.ENTRY
        return order

    def cancel_edit(self):
        self.editing = None
        self.view = View.RANGES

    def switch_view(self, view):
        view = View(view)
        if view == View.ENTRY:
            self.switch_to_entry()
        else:
            self.view = view

    @admin_only
    def switch_to_entry(self):
        self.editing = None
        self.view = View.ENTRY

    def set_role(self, role):
        self.role = Role(role)
        if self.role != Role.ADMIN and self.view == View.ENTRY:
            self.editing = None
            self.view = View.DASHBOARD

    # Presentation boundary

    def state(self):
        data = self.snapshot()
        return {
            "view": self.view.value,
            "role": self.role.value,
            "editing": self.editing_dict(),
            "data": data.to_dict(),
            "stats": compute_stats(data.orders).to_dict(),
        }

    def editing_dict(self):
        if self.editing is None:
            return None
        r = range_for(self.editing.number)
        return {**self.editing.to_dict(), "range": r.label if r else None}

    def to_session(self):
        return {
            "view": self.view.value,
            "role": self.role.value,
            "editing": self.editing.to_dict() if self.editing else None,
        }

    @classmethod
    def from_session(cls, store, saved, default_role=Role.ADMIN):
        saved = saved or {}
        editing = saved.get("editing")
        return cls(
            store,
            view=saved.get("view", View.DASHBOARD),
            role=saved.get("role", default_role),
            editing=Order.from_dict(editing) if editing else None,
        )


def get_controller():
    return AppController.from_session(
        get_store(),
        session.get(SESSION_KEY),
        default_role=current_app.config.get("DEFAULT_ROLE", Role.ADMIN.value),
    )


def save_controller(controller):
    session[SESSION_KEY] = controller.to_session()
