"""
JSON endpoints used by the mobile client.

Endpoints:
- /season: Season for a latitude (and optional date)
- /tips/daily: Next tip of the day, respecting the free allowance
- /tips/top: Highest-priority tips for the current context
- /health: Per-plant health scores and the garden summary
- /alerts: Weather alerts and watering recommendations
- /schedule: Notification plans for today, optionally dispatched

POST bodies share one shape:
    {
        "plants": [...],            # plant dicts (camelCase)
        "location": {"lat": .., "lon": ..},
        "weather": {...},           # app-shaped or raw Open-Meteo payload
        "date": "YYYY-MM-DD",       # optional, defaults to today
        "isPremium": false,
        "installDate": "YYYY-MM-DD",
        "deviceId": "..."           # required by /tips/daily
    }
"""

from datetime import date, datetime

from flask import Blueprint, current_app, jsonify, request

from ..extensions import limiter
from ..models import Location, plants_from_payload
from ..services import daily_tips, notifications
from ..services.daily_tips import build_tip_context, next_daily_tip
from ..services.notification_plans import plan_morning_reminder, plan_smart_sun_notifications
from ..services.plant_alerts import alert_counts, generate_plant_alerts
from ..services.plant_health import attention_summary, score_garden
from ..services.plant_logic import plants_needing_sun, tasks_for_day
from ..services.premium import PremiumGate
from ..services.seasons import resolve_season
from ..services.sun_schedule import compute_sun_window
from ..services.tip_selector import select_top_tips
from ..services.watering import get_watering_recommendations, group_recommendations_by_type, recommendation_summary
from ..services.weather import cached_weather, parse_weather, remember_weather
from ..utils.dates import parse_date, parse_datetime
from ..utils.errors import GENERIC_MESSAGES, log_info, sanitize_error
from ..utils.validation import normalize_device_id

api_bp = Blueprint("api", __name__)

MAX_TOP_TIPS = 10


def _tips_limit() -> str:
    return current_app.config.get("RATELIMIT_TIPS", "20 per minute")


@api_bp.before_request
def _enforce_ajax_for_mutations():
    """Enforce X-Requested-With header on all state-changing API requests.

    Custom headers cannot be set by cross-origin requests without CORS, so
    this header doubles as CSRF protection for the whole blueprint.
    """
    if request.method in ("POST", "PUT", "DELETE", "PATCH"):
        if request.headers.get("X-Requested-With") != "XMLHttpRequest":
            return jsonify({
                "success": False,
                "error": "Invalid request. Please refresh the page and try again."
            }), 403


def _bad_request(message: str):
    return jsonify({"success": False, "error": message}), 400


def _parse_body():
    """
    Parse the shared request shape.

    Weather missing from the body is looked up in the recent weather cache
    for the same location; weather that is present is remembered there.

    Raises:
        ValueError: when the body, a plant or a date is invalid
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")

    raw_plants = body.get("plants") or []
    if not isinstance(raw_plants, list) or not all(isinstance(p, dict) for p in raw_plants):
        raise ValueError("plants must be a list of objects")
    try:
        plants = plants_from_payload(raw_plants)
    except TypeError as e:
        raise ValueError(f"Invalid plant: {e}") from e

    location = Location.from_dict(body.get("location"))
    weather = parse_weather(body.get("weather"))
    if weather is None:
        weather = cached_weather(location)
    else:
        remember_weather(location, weather)

    today = parse_date(body.get("date")) or date.today()

    return {
        "body": body,
        "plants": plants,
        "location": location,
        "weather": weather,
        "today": today,
        "is_premium": bool(body.get("isPremium", False)),
        "install_date": parse_date(body.get("installDate")),
    }


@api_bp.route("/season")
def season_api():
    """
    Season for ?lat= (defaults to DEFAULT_LATITUDE) and optional ?date=.
    """
    lat = request.args.get("lat", type=float)
    try:
        as_of = parse_date(request.args.get("date")) or date.today()
    except ValueError as e:
        return _bad_request(sanitize_error(e, "validation", "Invalid season date"))

    if lat is None:
        lat = current_app.config.get("DEFAULT_LATITUDE")
    return jsonify({"success": True, "season": resolve_season(lat, as_of), "date": as_of.isoformat()})


@api_bp.route("/tips/daily", methods=["POST"])
@limiter.limit(_tips_limit)
def daily_tip_api():
    """
    Next tip of the day.

    Returns:
        {
            "success": true,
            "tip": {...} | null,
            "shownToday": 1,
            "locked": false
        }
    """
    try:
        req = _parse_body()
        device_id = normalize_device_id(req["body"].get("deviceId"))
    except ValueError as e:
        return _bad_request(sanitize_error(e, "validation", "Invalid daily tip request"))

    registry = current_app.extensions.get(daily_tips.EXTENSION_KEY)
    if registry is None:
        registry = daily_tips.init_tip_trackers(current_app)
    tracker = registry.for_device(device_id)

    try:
        context = build_tip_context(req["plants"], req["location"], req["weather"], req["today"])
        result = next_daily_tip(
            context,
            tracker,
            is_premium=req["is_premium"],
            install_date=req["install_date"],
        )
    except Exception as e:
        return jsonify({"success": False, "error": sanitize_error(e, "internal", "Daily tip failed")}), 500

    return jsonify({"success": True, "season": context.season, **result.to_dict()})


@api_bp.route("/tips/top", methods=["POST"])
@limiter.limit(_tips_limit)
def top_tips_api():
    try:
        req = _parse_body()
        max_count = int(req["body"].get("maxCount", 3))
    except (TypeError, ValueError) as e:
        return _bad_request(sanitize_error(e, "validation", "Invalid top tips request"))

    max_count = max(0, min(MAX_TOP_TIPS, max_count))
    context = build_tip_context(req["plants"], req["location"], req["weather"], req["today"])
    tips = select_top_tips(context, max_count)
    return jsonify({"success": True, "season": context.season, "tips": [t.to_dict() for t in tips]})


@api_bp.route("/health", methods=["POST"])
def health_api():
    """
    Per-plant health plus the garden summary.

    `garden` is null for an empty plant list.
    """
    try:
        req = _parse_body()
    except ValueError as e:
        return _bad_request(sanitize_error(e, "validation", "Invalid health request"))

    garden = score_garden(req["plants"], req["today"], req["weather"])
    shown, remaining = attention_summary(garden)
    return jsonify({
        "success": True,
        "garden": garden.to_dict() if garden else None,
        "attention": [s.to_dict() for s in shown],
        "attentionRemaining": remaining,
    })


@api_bp.route("/alerts", methods=["POST"])
def alerts_api():
    try:
        req = _parse_body()
    except ValueError as e:
        return _bad_request(sanitize_error(e, "validation", "Invalid alerts request"))

    gate = PremiumGate(req["is_premium"], req["install_date"], req["today"])
    if not gate.can_see_alerts():
        return jsonify({"success": True, "locked": True, "alerts": [], "watering": []})

    alerts = generate_plant_alerts(req["plants"], req["weather"])
    recommendations = get_watering_recommendations(req["plants"], req["weather"], req["today"])
    grouped = group_recommendations_by_type(recommendations)

    return jsonify({
        "success": True,
        "locked": False,
        "alerts": [a.to_dict() for a in alerts],
        "counts": alert_counts(alerts),
        "watering": [r.to_dict() for r in recommendations],
        "wateringGroups": [
            {**recommendation_summary(rec_type, len(recs)), "type": rec_type, "count": len(recs)}
            for rec_type, recs in grouped.items()
            if recs
        ],
    })


@api_bp.route("/schedule", methods=["POST"])
def schedule_api():
    """
    Today's tasks, sun windows and notification plans.

    With "dispatch": true the plans are handed to the notification
    dispatcher; a degraded dispatcher is reported but never fails the
    request.
    """
    try:
        req = _parse_body()
        now = parse_datetime(req["body"].get("now")) or datetime.now()
    except (TypeError, ValueError) as e:
        return _bad_request(sanitize_error(e, "validation", "Invalid schedule request"))

    # Plans are compared against naive local sunrise/sunset times
    now = now.replace(tzinfo=None)
    plants, weather = req["plants"], req["weather"]

    plans = [plan_morning_reminder(
        plants, weather, now, current_app.config.get("MORNING_REMINDER_TIME", "08:00")
    )]
    plans.extend(plan_smart_sun_notifications(plants, weather, now))

    windows = {}
    today_forecast = weather.today if weather else None
    if today_forecast and today_forecast.sunrise and today_forecast.sunset:
        for plant in plants_needing_sun(plants, now.date()):
            windows[plant.id] = compute_sun_window(plant, today_forecast.sunrise, today_forecast.sunset).to_dict()

    payload = {
        "success": True,
        "tasks": [t.to_dict() for t in tasks_for_day(plants, now.date())],
        "sunWindows": windows,
        "plans": [p.to_dict() for p in plans],
    }

    if req["body"].get("dispatch"):
        dispatcher = current_app.extensions.get(notifications.EXTENSION_KEY)
        if dispatcher is None or not dispatcher.available:
            payload["dispatch"] = {"status": "degraded", "error": GENERIC_MESSAGES["notification"], "results": []}
        else:
            results = [dispatcher.schedule(plan) for plan in plans]
            payload["dispatch"] = {
                "status": dispatcher.status.value,
                "results": [r.to_dict() for r in results],
            }
            log_info("Notification plans dispatched", count=sum(1 for r in results if r.scheduled))

    return jsonify(payload)
