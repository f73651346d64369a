"""
FormFixer - API Server
Flask application exposing the form analyzer, schema deriver and accessibility audit.
"""

import argparse
import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from formfixer.controllers.form_controller import FormController
from formfixer.managers.config_manager import config_manager
from formfixer.server.routers.api_router import api_router
from formfixer.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def create_app(controller: Optional[FormController] = None) -> Flask:
    """
    Application factory to initialize the Flask instance with its controller.
    """
    flask_app = Flask(__name__)
    CORS(flask_app)

    # Inject Controller into App Config for Blueprint access
    flask_app.config['FORM_CONTROLLER'] = controller or FormController()

    flask_app.register_blueprint(api_router, url_prefix='/api')

    @flask_app.route('/')
    def index():
        return "FormFixer API Running"

    return flask_app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False) -> None:
    host = host or config_manager.get_nested("server.host", "0.0.0.0")
    port = port or config_manager.get_nested("server.port", 5000)

    app = create_app()

    print("\n" + "=" * 50)
    print("🚀  FORMFIXER API")
    print("=" * 50)
    print(f"📡  Listening on: http://{host}:{port}")
    print("-" * 50)

    print("\n🔍 API ROUTE MAPPING:")
    for rule in app.url_map.iter_rules():
        if "api" in str(rule):
            print(f"   ✅ {rule}")
    print("-" * 50 + "\n")

    # use_reloader=False prevents double-initialization of the controller
    app.run(debug=debug, host=host, port=port, use_reloader=False)


def main():
    parser = argparse.ArgumentParser(description="FormFixer API Server")
    parser.add_argument("--host", type=str, default=None, help="Host interface to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    args = parser.parse_args()

    configure_logger(
        config_manager.get_nested("debug.level", "INFO"),
        silenced_loggers=config_manager.get_nested("debug.silenced", {}),
    )
    run_server(args.host, args.port, args.debug)


if __name__ == '__main__':
    main()
