from flask import Blueprint, request

from ..services.car_service import CarService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required
from ..utils.http import json_body, success, success_list

bp = Blueprint("cars", __name__, url_prefix="/api/cars")


@bp.get("")
def list_cars():
    return success_list(CarService.all_cars())


@bp.get("/search")
def search_cars():
    """Filter by make, model, category, available, min_price, max_price (all optional)."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    cars = CarService.search_cars(
        make=q.get("make"),
        model=q.get("model"),
        category=q.get("category"),
        available=q.get("available"),
        min_price=q.get("min_price"),
        max_price=q.get("max_price"),
    )
    return success_list(cars)


@bp.get("/<car_id>")
def get_car(car_id):
    return success(CarService.get_car(car_id))


@bp.post("")
@login_required
@role_required(Role.ADMIN)
def create_car():
    return success(CarService.create_car(json_body()), 201)


@bp.put("/<car_id>")
@login_required
@role_required(Role.ADMIN)
def update_car(car_id):
    return success(CarService.update_car(car_id, json_body()))


@bp.delete("/<car_id>")
@login_required
@role_required(Role.ADMIN)
def delete_car(car_id):
    CarService.delete_car(car_id)
    return success({})
