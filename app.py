import os, logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

import config
import db
import ledger
from matchmaker_api import bp_match
from oracle_api import bp_oracle

def configure_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

def _json_error(e: HTTPException):
    return jsonify({"ok": False, "error": e.description or e.name}), e.code

def _health():
    return jsonify({"ok": True, "ledger": ledger.is_enabled()})

def create_app(name: str, *blueprints, **overrides) -> Flask:
    """
    One Flask app per service. `overrides` land in app.config
    (tests pass GAME_DICE to pin the rolls).
    """
    app = Flask(name)
    app.config["MAX_CONTENT_LENGTH"] = 64 * 1024
    app.config.update(overrides)
    for bp in blueprints:
        app.register_blueprint(bp)
    app.register_error_handler(HTTPException, _json_error)
    app.add_url_rule("/health", "health", _health)
    db.init_db()
    return app

# ----------------- APPS -----------------
matchmaker_app = create_app("matchmaker", bp_match)
oracle_app = create_app("oracle", bp_oracle)

# ----------------- MAIN -----------------
if __name__ == "__main__":
    import sys
    configure_logging()
    which = (sys.argv[1] if len(sys.argv) > 1 else "matchmaker").strip().lower()
    if which == "oracle":
        oracle_app.run(host="0.0.0.0", port=int(os.getenv("PORT", config.ORACLE_PORT)), debug=False)
    else:
        matchmaker_app.run(host="0.0.0.0", port=int(os.getenv("PORT", config.MATCHMAKER_PORT)), debug=False)
