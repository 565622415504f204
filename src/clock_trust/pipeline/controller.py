from __future__ import annotations

import io
import logging

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.validators import (
    optional_float,
    optional_str,
    require_enum,
    require_latitude_longitude,
    require_non_empty,
)
from ..container import Container
from ..core.enums import EventType
from ..core.exceptions import ValidationError
from ..devices.probe import BrowserPayloadProbe, RequestHeaderProbe
from ..events.model import ClockEvent
from ..integrity.codes import parse_verification_uri, readable_code, render_qr_png, verification_uri

_logger = logging.getLogger(__name__)


def _client_ip() -> str | None:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.remote_addr


def _event_from_payload(data: dict) -> ClockEvent:
    raw_ts = data.get("timestamp")
    try:
        timestamp = parse_iso_datetime(raw_ts) if raw_ts else now_local()
    except ValueError:
        raise ValidationError("timestamp must be an ISO-8601 date-time")

    latitude = optional_float(data.get("latitude"), "latitude")
    longitude = optional_float(data.get("longitude"), "longitude")
    require_latitude_longitude(latitude, longitude)

    return ClockEvent(
        employee_id=require_non_empty(data.get("employee_id"), "employee_id"),
        company_id=require_non_empty(data.get("company_id"), "company_id"),
        user_id=require_non_empty(data.get("user_id"), "user_id"),
        type=require_enum(EventType, data.get("type"), "type"),
        timestamp=timestamp,
        latitude=latitude,
        longitude=longitude,
        ip_address=_client_ip(),
        device_descriptor=optional_str(data.get("device_descriptor")),
        photo_ref=optional_str(data.get("photo_ref")),
        nfc_tag=optional_str(data.get("nfc_tag")),
    )


def register(app: Flask, container: Container) -> None:
    pipeline = container.pipeline

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.route("/api/clock-events", methods=["POST"], endpoint="api_clock_events_submit")
    def submit_clock_event():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("A JSON object body is required")

        event = _event_from_payload(data)
        device_payload = data.get("device")
        if isinstance(device_payload, dict):
            probe = BrowserPayloadProbe(device_payload, headers=request.headers, secure=request.is_secure)
        else:
            probe = RequestHeaderProbe(request)

        result = pipeline.submit(event, probe)
        body = result.to_dict()
        body["success"] = result.accepted
        if result.integrity_bundle:
            body["verification_code"] = readable_code(result.integrity_bundle)
            body["verification_uri"] = verification_uri(result.integrity_bundle)
        return jsonify(body), result.http_status

    @app.route("/api/clock-events/<event_id>/verify", methods=["GET"], endpoint="api_clock_events_verify")
    def verify_clock_event(event_id: str):
        result = pipeline.verify_stored(event_id)
        return jsonify({
            "success": result.is_valid,
            "integrity": result.integrity,
            "authenticity": result.authenticity,
            "timestamp": result.timestamp_ok,
            "config_drift": result.config_drift,
            "warnings": result.warnings,
            "errors": result.errors,
        }), 200

    @app.route("/api/clock-events/<event_id>/qr", methods=["GET"], endpoint="api_clock_events_qr")
    def clock_event_qr(event_id: str):
        event = container.events_repo.get_by_id(event_id)
        if event is None or event.integrity_bundle is None:
            return jsonify({"success": False, "message": "Sealed clock event not found"}), 404
        png = render_qr_png(event.integrity_bundle)
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/api/verification-codes", methods=["POST"], endpoint="api_verification_codes")
    def check_verification_code():
        data = request.get_json(silent=True) or {}
        parsed = parse_verification_uri(require_non_empty(data.get("code"), "code"))
        if not parsed.is_valid:
            return jsonify({"success": False, "message": parsed.error}), 422
        return jsonify({"success": True, "data": parsed.data}), 200
