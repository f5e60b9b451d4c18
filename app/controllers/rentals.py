from flask import Blueprint, g

from ..services.rental_service import RentalService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required
from ..utils.http import json_body, success, success_list

bp = Blueprint("rentals", __name__, url_prefix="/api/rentals")


@bp.post("/check-availability")
def check_availability():
    """Public: is the car free for the requested dates? Reserves nothing."""
    data = json_body()
    available, message = RentalService.check_availability(
        data.get("car_id"), data.get("start_date"), data.get("end_date"),
    )
    return success(available=available, message=message)


@bp.get("/my-rentals")
@login_required
def my_rentals():
    return success_list(RentalService.rentals_for_user(g.user["user_id"]))


@bp.get("")
@login_required
@role_required(Role.ADMIN)
def list_rentals():
    return success_list(RentalService.list_rentals())


@bp.post("")
@login_required
def create_rental():
    """Book a car for the current user."""
    data = json_body()
    rental = RentalService.create_rental(
        customer_id=g.user["user_id"],
        car_id=data.get("car_id"),
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
        pickup_location=data.get("pickup_location"),
        dropoff_location=data.get("dropoff_location"),
        additional_requests=data.get("additional_requests") or "",
    )
    return success(rental, 201)


@bp.get("/<rental_id>")
@login_required
def get_rental(rental_id):
    return success(RentalService.get_rental(rental_id, requester=g.user))


@bp.put("/<rental_id>/status")
@login_required
@role_required(Role.ADMIN)
def update_status(rental_id):
    status = json_body().get("status")
    return success(RentalService.update_status(rental_id, status))


@bp.put("/<rental_id>/payment")
@login_required
@role_required(Role.ADMIN)
def update_payment(rental_id):
    payment_status = json_body().get("payment_status")
    return success(RentalService.update_payment_status(rental_id, payment_status))


@bp.put("/<rental_id>/cancel")
@login_required
def cancel_rental(rental_id):
    """Owner or admin; only pending/confirmed rentals."""
    return success(RentalService.cancel_rental(rental_id, requester=g.user))
