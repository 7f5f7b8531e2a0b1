import math
from dataclasses import dataclass, field, asdict

from .domain import OrderStatus, RANGES, coerce_number, color_for


def percent(part, whole):
    # half-up, so 2.5 -> 3 rather than banker's rounding
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


@dataclass
class FlavorStats:
    name: str
    total: int = 0
    delivered: int = 0
    pending: int = 0
    returned: int = 0

    @property
    def percentage(self):
        return percent(self.delivered, self.total)

    def to_dict(self):
        return {**asdict(self), "percentage": self.percentage, "color": color_for(self.name)}


@dataclass
class DashboardStats:
    total: int = 0
    delivered: int = 0
    pending: int = 0
    returned: int = 0
    flavors: list[FlavorStats] = field(default_factory=list)

    def to_dict(self):
        return {
            "total": self.total,
            "delivered": self.delivered,
            "pending": self.pending,
            "returned": self.returned,
            "flavors": [f.to_dict() for f in self.flavors],
        }


def compute_stats(orders):
    """Fold orders into status totals and a per-flavor breakdown.

    Any status other than DELIVERED or RETURNED counts as pending. Flavors
    are sorted by total, descending; ties keep first-seen order.
    """
    stats = DashboardStats(total=len(orders))
    by_flavor = {}
    for order in orders:
        entry = by_flavor.get(order.flavor)
        if entry is None:
            entry = by_flavor[order.flavor] = FlavorStats(name=order.flavor)
        entry.total += 1
        if order.status == OrderStatus.DELIVERED:
            stats.delivered += 1
            entry.delivered += 1
        elif order.status == OrderStatus.RETURNED:
            stats.returned += 1
            entry.returned += 1
        else:
            stats.pending += 1
            entry.pending += 1
    stats.flavors = sorted(by_flavor.values(), key=lambda f: f.total, reverse=True)
    return stats


def range_overview(orders):
    overview = []
    for r in RANGES:
        count = sum(1 for o in orders if o.number in r)
        overview.append({
            "label": r.label,
            "min": r.min,
            "max": r.max,
            "count": count,
            "is_full": count == r.size,
        })
    return overview


def range_items(orders, index, search=""):
    """One slot per number of ``RANGES[index]``, filled where an order exists.

    ``search`` matches the number's text, the flavor or the team,
    case-insensitively. Raises IndexError for an unknown range.
    """
    if index < 0:
        raise IndexError(index)
    r = RANGES[index]
    by_number = {}
    for o in orders:
        n = coerce_number(o.number)
        if n is not None and n not in by_number:
            by_number[n] = o

    needle = (search or "").strip().lower()
    items = []
    for number in range(r.min, r.max + 1):
        order = by_number.get(number)
        item = {"number": number}
        if order is not None:
            item.update(order.to_dict())
            item["number"] = number
        if needle and not (
            needle in str(number)
            or needle in (item.get("flavor") or "").lower()
            or needle in (item.get("team") or "").lower()
        ):
            continue
        items.append(item)
    return items
