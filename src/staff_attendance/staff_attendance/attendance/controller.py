from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, datetime

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..container import Container
from .model import AttendanceRecord
from .service import WorkflowResult

logger = logging.getLogger(__name__)


def record_to_dict(record: AttendanceRecord) -> dict:
    out = asdict(record)
    out["status"] = record.status.value
    for key, value in out.items():
        if isinstance(value, (date, datetime)):
            out[key] = value.isoformat()
    return out


def register(app: Flask, container: Container) -> None:
    def load_staff_and_shift(shift_id: str):
        data = request.get_json(silent=True) or {}
        staff_id = str(data.get("staff_id") or "").strip()
        if not staff_id:
            raise ValidationError("staff_id is required")

        staff = container.staff_repo.get_by_id(staff_id)
        if not staff:
            raise NotFoundError(f"Staff member {staff_id} not found")
        shift = container.shifts_repo.get_by_id(shift_id)
        if not shift:
            raise NotFoundError(f"Shift {shift_id} not found")
        return data, staff, shift

    def respond(result: WorkflowResult):
        if not result.ok:
            return jsonify({"success": False, "message": result.message}), 409

        report = container.notification_service.dispatch_all(result.notifications)
        body = {
            "success": True,
            "message": result.message,
            "record": record_to_dict(result.record) if result.record else None,
            "notifications": report.as_dict(),
        }
        if result.has_notice is not None:
            body["has_notice"] = result.has_notice
        if result.consecutive:
            body["consecutive"] = True
        if result.left_early_minutes is not None:
            body["left_early_minutes"] = result.left_early_minutes
        return jsonify(body), 200

    def run(shift_id: str, action):
        try:
            data, staff, shift = load_staff_and_shift(shift_id)
            return respond(action(data, staff, shift))
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except PersistenceError:
            logger.exception("Attendance action failed for shift %s", shift_id)
            return jsonify({"success": False, "message": "Attendance could not be saved, please try again"}), 503

    svc = container.attendance_service

    @app.route("/api/shifts/<shift_id>/clock-in", methods=["POST"], endpoint="api_clock_in")
    def api_clock_in(shift_id: str):
        return run(shift_id, lambda data, staff, shift: svc.clock_in(staff, shift))

    @app.route("/api/shifts/<shift_id>/clock-out", methods=["POST"], endpoint="api_clock_out")
    def api_clock_out(shift_id: str):
        return run(shift_id, lambda data, staff, shift: svc.clock_out(staff, shift))

    @app.route("/api/shifts/<shift_id>/call-off", methods=["POST"], endpoint="api_call_off")
    def api_call_off(shift_id: str):
        return run(shift_id, lambda data, staff, shift: svc.call_off(staff, shift, data.get("reason") or ""))

    @app.route("/api/shifts/<shift_id>/no-call-no-show", methods=["POST"], endpoint="api_no_call_no_show")
    def api_no_call_no_show(shift_id: str):
        return run(shift_id, lambda data, staff, shift: svc.no_call_no_show(staff, shift))

    @app.route("/api/shifts/<shift_id>/cancel", methods=["POST"], endpoint="api_cancel_shift")
    def api_cancel_shift(shift_id: str):
        return run(shift_id, lambda data, staff, shift: svc.cancel_shift(staff, shift, data.get("reason") or ""))

    @app.route("/api/shifts/<shift_id>/swap", methods=["POST"], endpoint="api_swap_shift")
    def api_swap_shift(shift_id: str):
        return run(
            shift_id,
            lambda data, staff, shift: svc.swap_shift(staff, str(data.get("target_staff_id") or ""), shift),
        )

    @app.route("/api/shifts/<shift_id>/recovery", methods=["POST"], endpoint="api_complete_recovery")
    def api_complete_recovery(shift_id: str):
        return run(shift_id, lambda data, staff, shift: svc.complete_recovery_shift(staff, shift))

    @app.route("/api/staff/<staff_id>/points", methods=["GET"], endpoint="api_staff_points")
    def api_staff_points(staff_id: str):
        staff = container.staff_repo.get_by_id(staff_id)
        if not staff:
            return jsonify({"success": False, "message": f"Staff member {staff_id} not found"}), 404

        as_of_raw = request.args.get("as_of")
        try:
            as_of = parse_iso_date(as_of_raw) if as_of_raw else now_local().date()
        except ValueError:
            return jsonify({"success": False, "message": "as_of must be YYYY-MM-DD"}), 400

        try:
            summary = container.points_service.summary(staff, as_of)
        except PersistenceError:
            logger.exception("Points lookup failed for staff %s", staff_id)
            return jsonify({"success": False, "message": "Points are temporarily unavailable"}), 503

        return jsonify({"success": True, **summary.as_dict()}), 200
