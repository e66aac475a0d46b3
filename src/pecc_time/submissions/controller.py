from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_utc, to_iso
from ..common.http import decode_body, read_json
from ..container import Container
from ..storage.mapping import SUBMISSION_CODEC
from .rules import validate_submission


def register(app: Flask, container: Container) -> None:
    repo = container.submissions_repo

    @app.route("/api/contractor-submissions", methods=["GET"], endpoint="api_list_submissions")
    def list_submissions():
        return jsonify([SUBMISSION_CODEC.to_wire(s) for s in repo.list_all()])

    @app.route("/api/contractor-submissions", methods=["POST"], endpoint="api_create_submission")
    def create_submission():
        body = read_json()
        body.pop("id", None)
        # Same default as the column: submitted now.
        if not body.get("submission_date"):
            body["submission_date"] = to_iso(now_utc())
        created = repo.create(validate_submission(decode_body(SUBMISSION_CODEC, body)))
        return jsonify(SUBMISSION_CODEC.to_wire(created))
