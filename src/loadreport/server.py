from __future__ import annotations

import logging

from flask import Flask, Response

from loadreport.report_group import ReportGroup

LOGGER = logging.getLogger(__name__)


def create_app(group: ReportGroup) -> Flask:
    """Serve the dashboard page at ``/`` and the raw reports at ``/reports``."""
    app = Flask(__name__)

    @app.route("/")
    def dashboard() -> Response:
        return Response(group.get_html(), status=200, mimetype="text/html")

    @app.route("/reports")
    def reports() -> Response:
        return Response(group.reports_json(), status=200, mimetype="application/json")

    return app


def run_server(group: ReportGroup, host: str, port: int) -> None:
    app = create_app(group)
    LOGGER.info("Serving reports on http://%s:%s/", host, port)
    app.run(host=host, port=port, threaded=False, use_reloader=False)
