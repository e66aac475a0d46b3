from __future__ import annotations

import dataclasses
import logging

from flask import Flask, jsonify

from ..common.http import decode_body, read_json
from ..container import Container
from ..core.exceptions import NotFound
from ..storage.mapping import USER_CODEC
from .permissions import validate_user

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    repo = container.users_repo

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        body = read_json()
        name = str(body.get("name") or body.get("username") or "")
        password = str(body.get("password") or "")

        user = repo.find_by_credentials(name, password)
        if user is None:
            logger.info("Rejected login for %r", name)
            return jsonify({"message": "Invalid credentials"}), 401
        return jsonify(USER_CODEC.to_wire(user))

    @app.route("/api/users", methods=["GET"], endpoint="api_list_users")
    def list_users():
        return jsonify([USER_CODEC.to_wire(u) for u in repo.list_all()])

    @app.route("/api/users", methods=["POST"], endpoint="api_create_user")
    def create_user():
        body = read_json()
        body.pop("id", None)
        draft = dataclasses.replace(decode_body(USER_CODEC, body), force_password_change=True)
        created = repo.create(validate_user(draft))
        logger.info("Created user %s (%s)", created.id, created.role.value)
        return jsonify(USER_CODEC.to_wire(created))

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="api_update_user")
    def update_user(user_id: int):
        existing = repo.get_by_id(user_id)
        if existing is None:
            raise NotFound("User not found")

        merged = {**USER_CODEC.to_wire(existing), **read_json(), "id": user_id}
        saved = repo.save(validate_user(decode_body(USER_CODEC, merged)))
        return jsonify(USER_CODEC.to_wire(saved))

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_delete_user")
    def delete_user(user_id: int):
        if not repo.delete_by_id(user_id):
            raise NotFound("User not found")
        return "", 204
