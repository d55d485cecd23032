import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, url_for

from src.agents.hub import get_blueprint
from src.agents.hub.registry import HubFactory

DEFAULT_PORT = int(os.environ.get("FLASK_PORT", "5000"))
DEFAULT_HOST = os.environ.get("FLASK_HOST", "127.0.0.1")


def create_app(hub_factory: Optional[HubFactory] = None) -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    if hub_factory is not None:
        app.config["HUB_FACTORY"] = hub_factory
    app.register_blueprint(get_blueprint())

    @app.route("/")
    def index():
        return jsonify({
            "name": "OmniAgent hub",
            "state": url_for("hub.state"),
            "agents": url_for("hub.agents"),
        })

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("OMNIAGENT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(host=DEFAULT_HOST, port=DEFAULT_PORT, debug=False)
