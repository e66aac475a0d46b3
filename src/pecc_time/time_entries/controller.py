from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import decode_body, read_json
from ..container import Container
from ..core.exceptions import NotFound
from ..storage.mapping import TIME_ENTRY_CODEC
from .rules import validate_time_entry


def register(app: Flask, container: Container) -> None:
    repo = container.time_entries_repo

    @app.route("/api/time-entries", methods=["GET"], endpoint="api_list_time_entries")
    def list_time_entries():
        return jsonify([TIME_ENTRY_CODEC.to_wire(e) for e in repo.list_all()])

    @app.route("/api/time-entries", methods=["POST"], endpoint="api_create_time_entry")
    def create_time_entry():
        body = read_json()
        body.pop("id", None)
        created = repo.create(validate_time_entry(decode_body(TIME_ENTRY_CODEC, body)))
        return jsonify(TIME_ENTRY_CODEC.to_wire(created))

    @app.route("/api/time-entries/<int:entry_id>", methods=["PUT"], endpoint="api_update_time_entry")
    def update_time_entry(entry_id: int):
        existing = repo.get_by_id(entry_id)
        if existing is None:
            raise NotFound("Time entry not found")

        merged = {**TIME_ENTRY_CODEC.to_wire(existing), **read_json(), "id": entry_id}
        saved = repo.save(validate_time_entry(decode_body(TIME_ENTRY_CODEC, merged)))
        return jsonify(TIME_ENTRY_CODEC.to_wire(saved))
