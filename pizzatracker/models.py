
from datetime import datetime, timezone
from . import db
from .domain import Order, Flavor, OrderStatus


def _utcnow():
    return datetime.now(timezone.utc)


class OrderDocument(db.Model):
    """One document per order, keyed by the stringified order number."""
    __tablename__ = "orders"
    key = db.Column(db.String(16), primary_key=True)
    number = db.Column(db.Integer, nullable=False, unique=True)
    team = db.Column(db.String(120), nullable=False, default="")
    flavor = db.Column(db.String(120), nullable=False)
    status = db.Column(db.Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False)
    timestamp = db.Column(db.BigInteger, nullable=False, default=0)

    def to_order(self):
        return Order(
            id=self.key,
            number=self.number,
            flavor=self.flavor,
            team=self.team or "",
            status=self.status,
            timestamp=self.timestamp,
        )


class FlavorDocument(db.Model):
    __tablename__ = "flavors"
    key = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_flavor(self):
        return Flavor(id=self.key, name=self.name)
