from __future__ import annotations

import dataclasses
import logging
from datetime import date
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_year_month, today_local
from ..common.validators import require_iso_date, require_year_month
from ..container import Container
from ..core.enums import EditorState, SubmitStatus
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from .session import LedgerSession

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Dataclasses, dates and enums to plain JSON values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def _month_arg(name: str, default: date) -> date:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return default
    return require_year_month(raw, name)


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Login required"}), 401
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except AuthorizationError as e:
                return jsonify({"success": False, "message": str(e)}), 403
            except Exception:
                logger.exception("Unhandled error in %s", view.__name__)
                return jsonify({"success": False, "message": "Internal server error"}), 500

        return wrapper

    def current_identity() -> str:
        return str(session["user_id"])

    def open_session(*, view_month: Optional[date] = None, salary_month: Optional[date] = None) -> LedgerSession:
        today = today_local()
        ledger = LedgerSession(
            container.attendance_service,
            identity=current_identity(),
            today=today,
            view_month=view_month or today,
            salary_month=salary_month or today,
            site_labels=container.site_service.site_labels(),
        )
        ledger.refresh()
        return ledger

    @app.route("/api/attendance/calendar", methods=["GET"], endpoint="attendance_calendar")
    @login_required
    def attendance_calendar():
        today = today_local()
        view_month = _month_arg("month", today)
        ledger = open_session(view_month=view_month, salary_month=_month_arg("salary_month", today))
        ledger.site_id = request.args.get("site")
        ledger.status_filter = request.args.get("status") or "all"

        return jsonify({
            "success": True,
            "month": format_year_month(ledger.view_month),
            "days": to_json(ledger.calendar_days()),
            "stats": to_json(ledger.monthly_stats()),
            "retryable": ledger.fetch_failed,
        })

    @app.route("/api/attendance/salary-history", methods=["GET"], endpoint="attendance_salary_history")
    @login_required
    def attendance_salary_history():
        salary_month = _month_arg("salary_month", today_local())
        show_all = (request.args.get("all") or "").lower() in ("1", "true", "yes")
        ledger = open_session(view_month=salary_month, salary_month=salary_month)
        history = container.payroll_report_service.build_salary_history(
            ledger.records, salary_month, show_all=show_all
        )
        return jsonify({"success": True, "history": to_json(history), "retryable": ledger.fetch_failed})

    @app.route("/api/attendance/sites", methods=["GET"], endpoint="attendance_sites")
    @login_required
    def attendance_sites():
        return jsonify({
            "success": True,
            "sites": to_json(container.site_service.site_options()),
            "assignments": to_json(container.site_service.assignment_options(current_identity())),
        })

    @app.route("/api/attendance/year-months", methods=["GET"], endpoint="attendance_year_months")
    @login_required
    def attendance_year_months():
        view_month = _month_arg("month", today_local())
        options = container.payroll_report_service.year_month_options(view_month)
        return jsonify({"success": True, "options": to_json(options)})

    @app.route("/api/attendance/day/<day>", methods=["GET"], endpoint="attendance_day")
    @login_required
    def attendance_day(day: str):
        work_date = require_iso_date(day, "day")
        ledger = open_session(view_month=work_date, salary_month=work_date)
        state = ledger.open_day(work_date)

        payload = {"success": True, "date": work_date.isoformat(), "state": state.value}
        if state == EditorState.CONFIRM_CREATE:
            payload["create"] = to_json(ledger.editor.confirm_create())
        else:
            payload["edits"] = ledger.editor.edits
            payload["records"] = to_json(ledger.editor.my_records)
        return jsonify(payload)

    @app.route("/api/attendance/day/<day>/labor", methods=["POST"], endpoint="attendance_save_labor")
    @login_required
    def attendance_save_labor(day: str):
        work_date = require_iso_date(day, "day")
        data = request.get_json(silent=True) or {}
        edits = data.get("edits")
        if not isinstance(edits, dict):
            raise ValidationError("edits must be an object of site id to man-days")

        ledger = open_session(view_month=work_date, salary_month=work_date)
        if ledger.open_day(work_date) != EditorState.EDITING:
            raise ValidationError("No records on this date; create a work log first")

        for site_id, value in edits.items():
            ledger.editor.set_labor(str(site_id), value)

        outcome = ledger.editor.submit()
        body = {
            "success": outcome.status != SubmitStatus.FAILED,
            "status": outcome.status.value,
            "message": outcome.message,
            "entries": to_json(outcome.entries),
        }
        return jsonify(body), (502 if outcome.status == SubmitStatus.FAILED else 200)

    @app.route("/api/attendance/reconcile", methods=["POST"], endpoint="attendance_reconcile")
    @login_required
    def attendance_reconcile():
        around_month = _month_arg("month", today_local())
        try:
            result = container.reconciliation_service.run(current_identity(), around_month=around_month)
        except StoreError as e:
            logger.warning("Reconciliation unavailable for %s: %s", current_identity(), e)
            return jsonify({"success": False, "message": str(e)}), 503

        return jsonify({
            "success": True,
            "created": result.created,
            "skipped": result.skipped,
            "failed": result.failed,
            "message": result.message,
        })
