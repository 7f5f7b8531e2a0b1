
from pizzatracker import create_app
from pizzatracker.domain import Order, OrderStatus, generate_id
from pizzatracker.storage import get_store

orders = [
    dict(number=1, flavor="Mussarela", team="Alpha", status=OrderStatus.DELIVERED),
    dict(number=2, flavor="Calabresa", team="Alpha"),
    dict(number=51, flavor="Portuguesa", team="Beta", status=OrderStatus.RETURNED),
    dict(number=120, flavor="Marguerita", team=""),
]

if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        store = get_store()
        store.load()
        for o in orders:
            store.upsert_order(Order(id=generate_id(), **o))
        print("Seeded sample orders.")
