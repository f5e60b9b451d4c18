from flask import Blueprint, g

from ..services.user_service import UserService
from ..utils.constants import Role
from ..utils.decorators import login_required, role_required
from ..utils.http import json_body, success, success_list

bp = Blueprint("users", __name__, url_prefix="/api/users")


@bp.get("")
@login_required
@role_required(Role.ADMIN)
def list_users():
    return success_list(UserService.list_users())


@bp.put("/profile")
@login_required
def update_profile():
    """Self-service profile update; `new_password` is optional."""
    return success(UserService.update_profile(g.user["user_id"], json_body()))


@bp.get("/<user_id>")
@login_required
@role_required(Role.ADMIN)
def get_user(user_id):
    return success(UserService.get_user(user_id))


@bp.put("/<user_id>")
@login_required
@role_required(Role.ADMIN)
def update_user(user_id):
    return success(UserService.admin_update_user(user_id, json_body()))


@bp.delete("/<user_id>")
@login_required
@role_required(Role.ADMIN)
def delete_user(user_id):
    UserService.delete_user(user_id)
    return success(message="User removed")
