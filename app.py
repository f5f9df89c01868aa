# app.py (gunicorn app:app, or python app.py locally)

import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from coldstore import __version__
from coldstore.app_config import load_config
from coldstore.register_blueprints import register_all_blueprints


def create_app(config_overrides=None):
    app = Flask(__name__)

    # -------------------------
    # Config & security
    # -------------------------
    load_config(app, config_overrides)
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    origins = app.config["CORS_ORIGINS"]
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=origins != "*")

    # -------------------------
    # Blueprints
    # -------------------------
    register_all_blueprints(app)

    @app.get("/health")
    def health():
        return jsonify({"ok": True, "version": __version__}), 200

    return app


# gunicorn entry point
app = create_app()


# Local run only
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")), debug=True)
