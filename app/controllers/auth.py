from flask import Blueprint, session, g

from ..services.user_service import UserService
from ..utils.decorators import login_required
from ..utils.http import json_body, success

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/register")
def register():
    """Create a customer account and log it in."""
    user = UserService.register(json_body())
    session.clear()
    session["uid"] = user["user_id"]
    session["role"] = user["role"]
    return success(user, 201)


@bp.post("/login")
def login():
    data = json_body()
    user = UserService.authenticate(data.get("email"), data.get("password"))
    session.clear()
    session["uid"] = user["user_id"]
    session["role"] = user["role"]
    return success(user)


@bp.post("/logout")
def logout():
    session.clear()
    return success(message="Logged out")


@bp.get("/me")
@login_required
def me():
    return success(g.user)
