
import json

import pytest
from sqlalchemy.exc import OperationalError

from pizzatracker.domain import AppData, Order, OrderStatus
from pizzatracker.errors import WriteError
from pizzatracker.storage import make_store
from pizzatracker.storage.local import LEGACY_STORAGE_KEY, STORAGE_KEY, LocalStore


def order(number, flavor="Mussarela", team="", status=OrderStatus.PENDING, id=""):
    return Order(id=id, number=number, flavor=flavor, team=team, status=status)


def test_load_seeds_default_flavors_once(store):
    data = store.load()
    if isinstance(store, LocalStore):
        assert store._slot(STORAGE_KEY).exists()
    assert data.orders == []
    assert [f.name for f in data.flavors] == [
        "Mussarela", "Calabresa", "Portuguesa", "Frango com Catupiry", "Marguerita",
    ]
    again = store.load()
    assert [f.id for f in again.flavors] == [f.id for f in data.flavors]


def test_upsert_same_number_keeps_first_id(store):
    store.load()
    first = store.upsert_order(order(10, flavor="Mussarela", id="first-id"))
    original_id = first.find_order(10).id
    assert original_id

    second = store.upsert_order(order(10, flavor="Calabresa", team="Red", id="other-id"))
    matches = [o for o in second.orders if o.number == 10]
    assert len(matches) == 1
    assert matches[0].id == original_id
    assert matches[0].flavor == "Calabresa"
    assert matches[0].team == "Red"
    assert store.load().find_order(10).flavor == "Calabresa"


def test_upsert_new_order_gets_an_id_and_timestamp(store):
    data = store.upsert_order(order(3))
    saved = data.find_order(3)
    assert saved.id
    assert saved.timestamp > 0
    assert saved.status == OrderStatus.PENDING


def test_cycle_status_closure(store):
    store.upsert_order(order(1))
    seen = []
    for _ in range(3):
        seen.append(store.cycle_order_status(1).find_order(1).status)
    assert seen == [OrderStatus.DELIVERED, OrderStatus.RETURNED, OrderStatus.PENDING]


def test_cycle_status_missing_order_is_noop(store):
    before = store.upsert_order(order(1))
    after = store.cycle_order_status(2)
    assert after.to_dict() == before.to_dict()


def test_delete_order_removes_only_that_number(store):
    for n in (4, 5, 6):
        store.upsert_order(order(n, team=f"team {n}"))
    data = store.delete_order(5)
    assert sorted(o.number for o in data.orders) == [4, 6]
    assert data.find_order(4).team == "team 4"

    unchanged = store.delete_order(99)
    assert len(unchanged.orders) == 2


def test_string_number_matches_numeric_record(store):
    store.upsert_order(order(7))
    assert store.cycle_order_status("7").find_order(7).status == OrderStatus.DELIVERED
    assert store.delete_order("7").find_order(7) is None


def test_flavor_add_and_remove_keeps_orders(store):
    store.load()
    data = store.add_flavor("Quatro Queijos")
    added = [f for f in data.flavors if f.name == "Quatro Queijos"]
    assert len(added) == 1
    assert len(data.flavors) == 6

    store.upsert_order(order(8, flavor="Quatro Queijos"))
    data = store.remove_flavor(added[0].id)
    assert "Quatro Queijos" not in [f.name for f in data.flavors]
    assert data.find_order(8).flavor == "Quatro Queijos"


def test_remove_unknown_flavor_is_noop(store):
    before = store.load()
    assert len(store.remove_flavor("nope").flavors) == len(before.flavors)


def write_slot(tmp_path, key, value):
    tmp_path.mkdir(parents=True, exist_ok=True)
    (tmp_path / f"{key}.json").write_text(json.dumps(value), encoding="utf-8")


def test_local_migrates_legacy_slot(tmp_path):
    write_slot(tmp_path, LEGACY_STORAGE_KEY, {
        "orders": [{"id": "a", "number": 5, "isDelivered": True, "flavor": "X", "team": "Y", "timestamp": 100}],
        "flavors": [],
    })
    store = LocalStore(tmp_path)
    data = store.load()
    assert [o.to_dict() for o in data.orders] == [{
        "id": "a", "number": 5, "flavor": "X", "team": "Y", "status": "DELIVERED", "timestamp": 100,
    }]
    assert data.flavors == []
    current = json.loads((tmp_path / f"{STORAGE_KEY}.json").read_text(encoding="utf-8"))
    assert current["orders"][0]["status"] == "DELIVERED"


def test_local_current_slot_wins_over_legacy(tmp_path):
    write_slot(tmp_path, STORAGE_KEY, {"orders": [], "flavors": [{"id": "9", "name": "Atum"}]})
    write_slot(tmp_path, LEGACY_STORAGE_KEY, {"orders": [{"id": "a", "number": 5}], "flavors": []})
    data = LocalStore(tmp_path).load()
    assert data.orders == []
    assert [f.name for f in data.flavors] == ["Atum"]


def test_local_delete_matches_string_stored_number(tmp_path):
    write_slot(tmp_path, STORAGE_KEY, {
        "orders": [{"id": "a", "number": "7", "flavor": "X", "team": "", "status": "PENDING", "timestamp": 1}],
        "flavors": [],
    })
    assert LocalStore(tmp_path).delete_order(7).orders == []


def test_local_load_degrades_on_corrupt_slot(tmp_path):
    tmp_path.mkdir(parents=True, exist_ok=True)
    (tmp_path / f"{STORAGE_KEY}.json").write_text("{not json", encoding="utf-8")
    store = LocalStore(tmp_path)
    assert store.load() == AppData.empty()
    with pytest.raises(WriteError):
        store.upsert_order(order(1))
    assert (tmp_path / f"{STORAGE_KEY}.json").read_text(encoding="utf-8") == "{not json"


def test_local_write_failure_propagates_and_keeps_state(tmp_path, monkeypatch):
    store = LocalStore(tmp_path)
    store.upsert_order(order(1))

    def fail(key, value):
        raise OSError("disk full")
    monkeypatch.setattr(store, "_set_item", fail)
    with pytest.raises(WriteError):
        store.delete_order(1)
    monkeypatch.undo()
    assert store.load().find_order(1) is not None


def test_remote_orders_keyed_by_number(remote_store):
    data = remote_store.upsert_order(order(12, id="ignored"))
    assert data.find_order(12).id == "12"


def test_remote_load_degrades_on_backend_error(remote_store, monkeypatch):
    remote_store.load()

    def fail():
        raise OperationalError("SELECT", {}, Exception("connection lost"))
    monkeypatch.setattr(remote_store, "_snapshot", fail)
    assert remote_store.load() == AppData.empty()


def test_remote_write_failure_propagates(remote_store, monkeypatch):
    remote_store.load()

    def fail():
        raise OperationalError("COMMIT", {}, Exception("connection lost"))
    monkeypatch.setattr(remote_store.db.session, "commit", fail)
    with pytest.raises(WriteError):
        remote_store.upsert_order(order(1))
    monkeypatch.undo()
    assert remote_store.load().find_order(1) is None


def test_make_store_rejects_unknown_backend():
    with pytest.raises(ValueError):
        make_store({"STORAGE_BACKEND": "cloud"})


def test_remote_reread_failure_does_not_report_committed_write(remote_store, monkeypatch):
    remote_store.load()

    def fail():
        raise OperationalError("SELECT", {}, Exception("connection lost"))
    monkeypatch.setattr(remote_store, "_snapshot", fail)
    assert remote_store.upsert_order(order(1)) == AppData.empty()
    monkeypatch.undo()
    assert remote_store.load().find_order(1) is not None


def test_remote_removing_last_flavor_does_not_reseed(remote_store):
    data = remote_store.load()
    for flavor in data.flavors:
        data = remote_store.remove_flavor(flavor.id)
    assert data.flavors == []
