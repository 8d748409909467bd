"""Flask JSON service for fleet maintenance and worker risk."""

import logging
import os
from datetime import date, datetime, time, timezone
from pathlib import Path

from flask import Flask, abort, jsonify, request

from fleetiq import RiskLevel, VehicleFilter, load_fleet, summarize_schedule

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Snapshot served by the API (overridable for tests)
app.config["SNAPSHOT_PATH"] = os.environ.get(
    "FLEET_SNAPSHOT", str(Path(__file__).parent.parent / "snapshots" / "example.yaml")
)


def get_fleet():
    """Load the configured snapshot, or 503 if it is missing."""
    path = Path(app.config["SNAPSHOT_PATH"])
    if not path.exists():
        logger.error("Snapshot not found: %s", path)
        abort(503, description=f"Snapshot not found: {path.name}")
    return load_fleet(path)


def date_arg(name: str):
    """Parse an optional YYYY-MM-DD query parameter, 400 on bad input."""
    value = request.args.get(name)
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        abort(400, description=f"Invalid date for '{name}': {value}")


def as_of_datetime():
    as_of = date_arg("as_of")
    if as_of is None:
        return datetime.now(timezone.utc)
    return datetime.combine(as_of, time.max)


def vehicle_filter_arg() -> VehicleFilter:
    return VehicleFilter(
        state=request.args.get("state"),
        function_class=request.args.get("function_class"),
        ownership=request.args.get("ownership"),
        provider=request.args.get("provider"),
    )


@app.errorhandler(400)
@app.errorhandler(404)
@app.errorhandler(503)
def json_error(error):
    return jsonify({"success": False, "error": error.description}), error.code


@app.route("/api/plans")
def plans():
    """Maintenance plan schedule with summary counts."""
    fleet = get_fleet()
    as_of = date_arg("as_of") or datetime.now(timezone.utc)
    try:
        schedule = fleet.plan_schedule(
            as_of,
            vehicle_filter=vehicle_filter_arg(),
            date_from=date_arg("from"),
            date_to=date_arg("to"),
            status_filter=request.args.get("status"),
        )
    except ValueError as e:
        abort(400, description=str(e))

    return jsonify({
        "success": True,
        "as_of": as_of.isoformat(),
        "plans": [d.to_dict() for d in schedule],
        "summary": summarize_schedule(schedule).to_dict(),
    })


@app.route("/api/workers")
def workers():
    """Worker risk levels, highest risk first."""
    fleet = get_fleet()
    months = request.args.get("months", "12")
    if not months.isdigit() or int(months) < 1:
        abort(400, description=f"Invalid months: {months}")

    try:
        risks = fleet.worker_risk(
            as_of_datetime(),
            lookback_months=int(months),
            vehicle_filter=vehicle_filter_arg(),
            min_level=request.args.get("min_level"),
        )
    except ValueError as e:
        abort(400, description=str(e))

    return jsonify({
        "success": True,
        "workers": [w.to_dict() for w in risks],
        "summary": {
            "red_count": sum(1 for w in risks if w.level == RiskLevel.RED),
            "amber_count": sum(1 for w in risks if w.level == RiskLevel.AMBER),
            "green_count": sum(1 for w in risks if w.level == RiskLevel.GREEN),
            "hvnl_incidents": sum(w.counts.hvnl_incidents_12m for w in risks),
            "critical_defects": sum(w.counts.critical_defects_90d for w in risks),
        },
    })


@app.route("/api/workers/<name>")
def worker_detail(name: str):
    """One worker's risk profile."""
    fleet = get_fleet()
    profile = fleet.worker_profile(name, as_of_datetime())
    if profile is None:
        abort(404, description=f"Worker '{name}' not found")

    return jsonify({
        "success": True,
        "worker": profile.risk.to_dict(),
        "prestart_count": len(profile.prestarts),
        "failed_prestart_ids": [p.id for p in profile.failed_prestarts],
        "critical_defect_ids": [d.id for d in profile.critical_defects],
        "recent_incident_ids": [i.id for i in profile.recent_incidents],
        "hvnl_incident_ids": [i.id for i in profile.hvnl_incidents],
    })


@app.route("/api/downtime")
def downtime():
    """Downtime aggregates for a period (defaults to the last 90 days)."""
    fleet = get_fleet()
    end = date_arg("to") or date.today()
    start = date_arg("from") or date.fromordinal(end.toordinal() - 90)
    if start > end:
        abort(400, description="'from' must not be after 'to'")

    summary = fleet.downtime(
        datetime.combine(start, time.min),
        datetime.combine(end, time.max),
        vehicle_filter=vehicle_filter_arg(),
    )
    return jsonify({"success": True, **summary.to_dict()})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
