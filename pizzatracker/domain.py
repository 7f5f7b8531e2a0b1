import time
import uuid
from dataclasses import dataclass, field, asdict
from enum import Enum

from .errors import ValidationError

MIN_NUMBER = 1
MAX_NUMBER = 400


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    DELIVERED = "DELIVERED"
    RETURNED = "RETURNED"


class Role(str, Enum):
    ADMIN = "ADMIN"
    VIEWER = "VIEWER"


_STATUS_CYCLE = {
    OrderStatus.PENDING: OrderStatus.DELIVERED,
    OrderStatus.DELIVERED: OrderStatus.RETURNED,
    OrderStatus.RETURNED: OrderStatus.PENDING,
}


def next_status(status):
    """Advance along PENDING -> DELIVERED -> RETURNED -> PENDING.

    Anything that is not a known status restarts the cycle at PENDING.
    """
    try:
        return _STATUS_CYCLE[OrderStatus(status)]
    except ValueError:
        return OrderStatus.PENDING


def parse_status(value):
    try:
        return OrderStatus(value)
    except ValueError:
        return OrderStatus.PENDING


def coerce_number(value):
    """Return ``value`` as an int, accepting ``7``, ``7.0`` and ``"7"``.

    Returns None when the value has no integer reading, so lookups on it
    simply match nothing.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def generate_id():
    return uuid.uuid4().hex


def now_ms():
    return int(time.time() * 1000)


@dataclass
class Order:
    id: str
    number: int
    flavor: str
    team: str = ""
    status: OrderStatus = OrderStatus.PENDING
    timestamp: int = 0

    def to_dict(self):
        return {
            "id": self.id,
            "number": self.number,
            "flavor": self.flavor,
            "team": self.team,
            "status": self.status.value if hasattr(self.status, 'value') else str(self.status),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data):
        number = coerce_number(data.get("number"))
        return cls(
            id=str(data.get("id") or ""),
            number=number if number is not None else data.get("number"),
            flavor=data.get("flavor") or "",
            team=data.get("team") or "",
            status=parse_status(data.get("status")),
            timestamp=int(data.get("timestamp") or 0),
        )


@dataclass
class Flavor:
    id: str
    name: str

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(id=str(data.get("id")), name=data.get("name") or "")


DEFAULT_FLAVORS = (
    Flavor(id="1", name="Mussarela"),
    Flavor(id="2", name="Calabresa"),
    Flavor(id="3", name="Portuguesa"),
    Flavor(id="4", name="Frango com Catupiry"),
    Flavor(id="5", name="Marguerita"),
)


@dataclass
class AppData:
    """The whole persisted state: every order and the flavor catalog."""

    orders: list[Order] = field(default_factory=list)
    flavors: list[Flavor] = field(default_factory=list)

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def seeded(cls):
        return cls(orders=[], flavors=[Flavor(f.id, f.name) for f in DEFAULT_FLAVORS])

    def find_order(self, number):
        wanted = coerce_number(number)
        if wanted is None:
            return None
        for order in self.orders:
            if coerce_number(order.number) == wanted:
                return order
        return None

    def to_dict(self):
        return {
            "orders": [o.to_dict() for o in self.orders],
            "flavors": [f.to_dict() for f in self.flavors],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            orders=[Order.from_dict(o) for o in data.get("orders") or []],
            flavors=[Flavor.from_dict(f) for f in data.get("flavors") or []],
        )


def migrate_legacy(data):
    """Convert the v1 layout (boolean ``isDelivered``) to the status layout.

    Top-level keys other than ``orders`` are carried over untouched.
    """
    orders = []
    for o in data.get("orders") or []:
        orders.append({
            "id": o.get("id"),
            "number": o.get("number"),
            "flavor": o.get("flavor"),
            "team": o.get("team"),
            "timestamp": o.get("timestamp"),
            "status": (OrderStatus.DELIVERED if o.get("isDelivered") else OrderStatus.PENDING).value,
        })
    return {**data, "orders": orders}


@dataclass(frozen=True)
class Range:
    label: str
    min: int
    max: int

    @property
    def size(self):
        return self.max - self.min + 1

    def __contains__(self, number):
        n = coerce_number(number)
        return n is not None and self.min <= n <= self.max


RANGES = tuple(
    Range(f"{lo} - {lo + 49}", lo, lo + 49) for lo in range(MIN_NUMBER, MAX_NUMBER, 50)
)


def range_for(number):
    for r in RANGES:
        if number in r:
            return r
    return None


FLAVOR_COLORS = (
    "#EF5350",  # red
    "#AB47BC",  # purple
    "#5C6BC0",  # indigo
    "#42A5F5",  # blue
    "#26C6DA",  # cyan
    "#26A69A",  # teal
    "#66BB6A",  # green
    "#9CCC65",  # light green
    "#D4E157",  # lime
    "#FFCA28",  # amber
    "#FFA726",  # orange
    "#FF7043",  # deep orange
    "#8D6E63",  # brown
    "#78909C",  # blue grey
    "#EC407A",  # pink
)


def _int32(value):
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def color_for(name):
    """Pick a palette colour for a flavor name.

    Rolling hash over UTF-16 code units, so a given name maps to the same
    colour in every session and on every client.
    """
    h = 0
    encoded = name.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = unit + (_int32(_int32(h) << 5) - h)
    return FLAVOR_COLORS[abs(h) % len(FLAVOR_COLORS)]


def parse_order_form(payload, existing_id=None):
    """Build an Order from loosely typed form input, or raise ValidationError."""
    number = coerce_number(payload.get("number"))
    if number is None or not MIN_NUMBER <= number <= MAX_NUMBER:
        raise ValidationError(f"number must be between {MIN_NUMBER} and {MAX_NUMBER}")
    flavor = (payload.get("flavor") or "").strip()
    if not flavor:
        raise ValidationError("flavor is required")
    status = payload.get("status") or OrderStatus.PENDING.value
    if status not in {s.value for s in OrderStatus}:
        raise ValidationError("invalid status")
    return Order(
        id=existing_id or payload.get("id") or generate_id(),
        number=number,
        flavor=flavor,
        team=(payload.get("team") or "").strip(),
        status=OrderStatus(status),
        timestamp=now_ms(),
    )
