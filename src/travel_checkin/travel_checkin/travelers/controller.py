from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_time_label, parse_iso_date
from ..core.enums import SegmentKind
from ..core.exceptions import MutationInFlightError, PersistenceError, ValidationError
from ..container import Container


def to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _time_label(payload: dict, prefix: str) -> str:
    label = payload.get(f"{prefix}_time")
    if label:
        return str(label)
    day = payload.get(f"{prefix}_date")
    if not day:
        return ""
    try:
        return format_time_label(parse_iso_date(str(day)), str(payload.get(f"{prefix}_clock") or ""))
    except ValueError:
        raise ValidationError(f"Invalid {prefix} date: {day}") from None


def _parse_kind(value: str) -> SegmentKind:
    try:
        return SegmentKind(value.lower())
    except ValueError:
        raise ValidationError(f"Unknown segment kind: {value}") from None


def register(app: Flask, container: Container) -> None:
    service = container.traveler_service
    store = container.traveler_store

    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(MutationInFlightError)
    def _in_flight(e):
        return jsonify({"success": False, "message": str(e)}), 409

    @app.errorhandler(PersistenceError)
    def _persistence_error(e):
        app.logger.error("Storage error: %s", e)
        return jsonify({"success": False, "message": "Database error, please retry"}), 503

    def _snapshot_response():
        snap = store.snapshot
        return jsonify(
            {
                "success": True,
                "arrivals": to_json(snap.arrivals),
                "departures": to_json(snap.departures),
                "persons": to_json(snap.persons),
                "skipped": snap.skipped_count,
            }
        )

    @app.route("/api/travelers", methods=["GET"], endpoint="travelers")
    def travelers():
        if request.args.get("refresh", "1") != "0":
            store.refresh()
        return _snapshot_response()

    @app.route("/api/departures/all", methods=["GET"], endpoint="all_departures")
    def all_departures():
        return jsonify({"success": True, "departures": to_json(store.snapshot.all_departures)})

    @app.route("/api/flights/<kind>", methods=["GET"], endpoint="flights")
    def flights(kind: str):
        groups = service.flight_groups(_parse_kind(kind))
        return jsonify({"success": True, "groups": [{"key": k, "segments": to_json(v)} for k, v in groups]})

    @app.route("/api/stats", methods=["GET"], endpoint="stats")
    def stats():
        return jsonify({"success": True, **to_json(service.stats())})

    # POST activates, DELETE undoes
    transitions = {
        "check-in": lambda sid, on: store.check_in(sid) if on else store.undo_check_in(sid),
        "check-out": lambda sid, on: store.check_out(sid) if on else store.undo_check_out(sid),
        "hold": store.set_held,
        "transport": store.set_transported,
    }

    @app.route("/api/segments/<segment_id>/<action>", methods=["POST", "DELETE"], endpoint="segment_action")
    def segment_action(segment_id: str, action: str):
        transition = transitions.get(action)
        if transition is None:
            raise ValidationError(f"Unknown action: {action}")
        transition(segment_id, request.method == "POST")
        return _snapshot_response()

    @app.route("/api/segments/<segment_id>/notes", methods=["PUT"], endpoint="segment_notes")
    def segment_notes(segment_id: str):
        payload = request.get_json(silent=True) or {}
        store.update_notes(segment_id, payload.get("notes") or None)
        return _snapshot_response()

    @app.route("/api/individuals", methods=["POST"], endpoint="add_individual")
    def add_individual():
        payload = request.get_json(silent=True) or {}
        arrival, departure = service.add_individual(
            name=str(payload.get("name") or ""),
            arrival_flight=str(payload.get("arrival_flight") or ""),
            arrival_time=_time_label(payload, "arrival"),
            departure_flight=str(payload.get("departure_flight") or ""),
            departure_time=_time_label(payload, "departure"),
            overnight_hotel=bool(payload.get("overnight_hotel", False)),
            departure_kind=_parse_kind(str(payload.get("departure_kind") or "departure")),
        )
        return jsonify({"success": True, "person_key": arrival.person_key, "segments": to_json([arrival, departure])}), 201

    @app.route("/api/persons/<person_key>", methods=["PATCH"], endpoint="update_person")
    def update_person(person_key: str):
        payload = request.get_json(silent=True) or {}
        fields = {k: payload[k] for k in ("photo_url", "notes") if k in payload}
        result = service.update_person(person_key, **fields)
        if not result.matched:
            return jsonify({"success": False, "message": "No matching traveler records found to update"}), 404
        return jsonify({"success": True, "rows": result.rows_affected})

    @app.route("/api/persons/<person_key>", methods=["DELETE"], endpoint="delete_person")
    def delete_person(person_key: str):
        rows = service.delete_person(person_key)
        return jsonify({"success": True, "rows": rows})
