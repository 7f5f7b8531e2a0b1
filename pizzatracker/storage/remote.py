import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError

from . import Store
from ..domain import AppData, DEFAULT_FLAVORS, coerce_number, generate_id, next_status, now_ms
from ..errors import WriteError
from ..models import OrderDocument, FlavorDocument

logger = logging.getLogger(__name__)


class RemoteStore(Store):

    def __init__(self, db):
        self.db = db

    def _snapshot(self):
        orders = [d.to_order() for d in OrderDocument.query.order_by(OrderDocument.number.asc()).all()]
        flavors = [
            d.to_flavor()
            for d in FlavorDocument.query.order_by(FlavorDocument.created_at.asc(), FlavorDocument.key.asc()).all()
        ]
        return AppData(orders=orders, flavors=flavors)

    def _seed_flavors(self):
        # one commit, so the catalog is either fully seeded or not at all
        base = datetime.now(timezone.utc)
        self.db.session.add_all([
            FlavorDocument(key=generate_id(), name=f.name, created_at=base + timedelta(microseconds=i))
            for i, f in enumerate(DEFAULT_FLAVORS)
        ])
        self.db.session.commit()
        logger.info("Seeded flavors collection with %d defaults", len(DEFAULT_FLAVORS))

    def _mutate(self, action, change):
        try:
            change()
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.error("Remote %s failed", action, exc_info=True)
            raise WriteError(f"could not {action}: {exc}") from exc
        # committed; a failed re-read degrades like load instead of reporting the write as lost
        try:
            return self._snapshot()
        except SQLAlchemyError:
            self.db.session.rollback()
            logger.warning("Remote %s committed but re-read failed", action, exc_info=True)
            return AppData.empty()

    def load(self):
        try:
            if FlavorDocument.query.first() is None:
                self._seed_flavors()
            return self._snapshot()
        except SQLAlchemyError:
            self.db.session.rollback()
            logger.warning("Could not read remote store, continuing with empty data", exc_info=True)
            return AppData.empty()

    def upsert_order(self, order):
        number = coerce_number(order.number)

        def change():
            doc = self.db.session.get(OrderDocument, str(number))
            if doc is None:
                doc = OrderDocument(key=str(number), number=number)
                self.db.session.add(doc)
            doc.flavor = order.flavor
            doc.team = order.team or ""
            doc.status = order.status
            doc.timestamp = now_ms()
        return self._mutate("save order", change)

    def delete_order(self, number):
        number = coerce_number(number)

        def change():
            if number is None:
                return
            doc = self.db.session.get(OrderDocument, str(number))
            if doc is not None:
                self.db.session.delete(doc)
        return self._mutate("delete order", change)

    def cycle_order_status(self, number):
        number = coerce_number(number)

        def change():
            if number is None:
                return
            doc = self.db.session.get(OrderDocument, str(number))
            if doc is not None:
                doc.status = next_status(doc.status)
        return self._mutate("change order status", change)

    def add_flavor(self, name):
        def change():
            self.db.session.add(FlavorDocument(key=generate_id(), name=name))
        return self._mutate("add flavor", change)

    def remove_flavor(self, flavor_id):
        def change():
            doc = self.db.session.get(FlavorDocument, str(flavor_id))
            if doc is not None:
                self.db.session.delete(doc)
        return self._mutate("remove flavor", change)
