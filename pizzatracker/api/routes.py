
from flask import Blueprint, request, jsonify, abort
from ..controller import get_controller, save_controller
from ..domain import parse_order_form
from ..stats import compute_stats, range_overview, range_items

api_bp = Blueprint('api', __name__)

@api_bp.get('/data')
def load_data():
    controller = get_controller()
    return jsonify(controller.load().to_dict())

@api_bp.post('/orders')
def save_order():
    controller = get_controller()
    data = request.get_json(force=True, silent=True) or {}
    existing_id = controller.editing.id if controller.editing else None
    order = parse_order_form(data, existing_id=existing_id)
    app_data = controller.save_order(order)
    save_controller(controller)
    return jsonify(app_data.to_dict()), 201

@api_bp.delete('/orders/<number>')
def delete_order(number):
    controller = get_controller()
    return jsonify(controller.delete_order(number).to_dict())

@api_bp.post('/orders/<number>/cycle')
def cycle_status(number):
    controller = get_controller()
    return jsonify(controller.cycle_status(number).to_dict())

@api_bp.post('/flavors')
def add_flavor():
    controller = get_controller()
    data = request.get_json(force=True, silent=True) or {}
    return jsonify(controller.add_flavor(data.get('name')).to_dict()), 201

@api_bp.delete('/flavors/<flavor_id>')
def remove_flavor(flavor_id):
    controller = get_controller()
    return jsonify(controller.remove_flavor(flavor_id).to_dict())

@api_bp.get('/stats')
def stats():
    orders = get_controller().load().orders
    return jsonify(compute_stats(orders).to_dict())

@api_bp.get('/ranges')
def list_ranges():
    orders = get_controller().load().orders
    return jsonify(range_overview(orders))

@api_bp.get('/ranges/<int:index>')
def show_range(index):
    orders = get_controller().load().orders
    try:
        items = range_items(orders, index, request.args.get('q', ''))
    except IndexError:
        abort(404)
    return jsonify(items)
