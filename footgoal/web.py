#!/usr/bin/env python3
"""
HTTP boundary for the schedule and stream resolution.

Routes:
- GET /api/stream?id=<opaque id>[&folder=<mirror>][&alt=<channel id>][&title=<match title>]
  302 to the resolved embed URL, 400 for a missing or malformed id,
  404 when nothing could be found. ``alt`` is echoed back as a suggestion;
  with ``title`` the other channels of that match are listed and the first
  one is suggested when no ``alt`` was given.
- GET /api/schedule[?cat=<category>]
  Normalized matches as JSON. ``cat=all`` disables the category filter.
"""

from __future__ import annotations

import argparse
import datetime as dt
import os
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, make_response, redirect, request

from footgoal.errors import MalformedIdentifier
from footgoal.normalizer import find_alternative_channels, schedule_to_matches, summarize_categories
from footgoal.orchestrator import DEFAULT_CATEGORY, ScheduleService
from footgoal.scrape_schedule_daddylive import PLAYER_FOLDERS
from footgoal.stream_resolver import StreamResolver


footgoal_bp = Blueprint("footgoal", __name__)

ALL_CATEGORIES = "all"


def get_resolver() -> StreamResolver:
    resolver = current_app.config.get("FOOTGOAL_RESOLVER")
    if resolver is None:
        resolver = StreamResolver()
        current_app.config["FOOTGOAL_RESOLVER"] = resolver
    return resolver


def get_service() -> ScheduleService:
    service = current_app.config.get("FOOTGOAL_SERVICE")
    if service is None:
        service = ScheduleService()
        current_app.config["FOOTGOAL_SERVICE"] = service
    return service


@footgoal_bp.route("/api/stream")
def stream_redirect():
    channel_id = (request.args.get("id") or "").strip()
    if not channel_id:
        return jsonify({"ok": False, "error": "missing id"}), 400

    folder = (request.args.get("folder") or PLAYER_FOLDERS[0]).strip().lower()
    if folder not in PLAYER_FOLDERS:
        return jsonify({"ok": False, "error": f"unknown folder {folder}"}), 400

    resolution = get_resolver().resolve(channel_id, folder=folder)
    if resolution.ok:
        return make_response(redirect(resolution.url, code=302))

    error = resolution.error
    if isinstance(error, MalformedIdentifier):
        return jsonify({"ok": False, "error": str(error), "id": channel_id}), 400

    body = {"ok": False, "error": str(error) if error else "stream not found", "id": channel_id}
    alternative = (request.args.get("alt") or "").strip()
    title = (request.args.get("title") or "").strip()
    if title:
        others = find_alternative_channels(get_service().get_matches(category=None), title, channel_id)
        body["alternatives"] = [channel.to_dict() for channel in others]
        if not alternative and others:
            alternative = others[0].channel_id
    if alternative and alternative != channel_id:
        body["suggestion"] = alternative
    return jsonify(body), 404


@footgoal_bp.route("/api/schedule")
def schedule_json():
    category = (request.args.get("cat") or DEFAULT_CATEGORY).strip()
    if category.lower() == ALL_CATEGORIES:
        category = None

    now = dt.datetime.now()
    result = get_service().fetch(category, now)
    matches = schedule_to_matches(
        result.schedule,
        category=category,
        now=now,
        live_window_minutes=result.live_window_minutes,
        natural_ids=result.natural_ids,
    )
    return jsonify(
        {
            "ok": True,
            "source": result.source,
            "synthetic": result.synthetic,
            "categories": summarize_categories(result.schedule),
            "matches": [match.to_dict() for match in matches],
        }
    )


def create_app(resolver: Optional[StreamResolver] = None, service: Optional[ScheduleService] = None) -> Flask:
    app = Flask(__name__)
    app.config["FOOTGOAL_RESOLVER"] = resolver
    app.config["FOOTGOAL_SERVICE"] = service
    app.register_blueprint(footgoal_bp)
    return app


def parse_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the schedule and stream endpoints.")
    parser.add_argument("--host", type=str, default=os.getenv("FOOTGOAL_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("FOOTGOAL_PORT", "5000")))
    return parser.parse_args()


def main() -> int:
    args = parse_cli_args()
    create_app().run(host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
