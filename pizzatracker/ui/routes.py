
from flask import Blueprint, request, jsonify
from ..controller import View, get_controller, save_controller
from ..domain import Role
from ..errors import ValidationError

ui_bp = Blueprint('ui', __name__)

@ui_bp.get('/state')
def state():
    return jsonify(get_controller().state())

@ui_bp.post('/view')
def switch_view():
    controller = get_controller()
    data = request.get_json(force=True, silent=True) or {}
    view = data.get('view')
    if view not in {v.value for v in View}:
        raise ValidationError("invalid view")
    controller.switch_view(view)
    save_controller(controller)
    return jsonify(controller.state())

@ui_bp.post('/edit/<number>')
def begin_edit(number):
    controller = get_controller()
    controller.begin_edit(number)
    save_controller(controller)
    return jsonify(controller.state())

@ui_bp.post('/cancel')
def cancel_edit():
    controller = get_controller()
    controller.cancel_edit()
    save_controller(controller)
    return jsonify(controller.state())

@ui_bp.post('/role')
def set_role():
    controller = get_controller()
    data = request.get_json(force=True, silent=True) or {}
    role = data.get('role')
    if role not in {r.value for r in Role}:
        raise ValidationError("invalid role")
    controller.set_role(role)
    save_controller(controller)
    return jsonify(controller.state())
