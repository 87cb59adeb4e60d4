import os
import logging
from flask import Flask, Response, request
from flask_cors import CORS
from dotenv import load_dotenv

from services.static_files import (
    ResourceNotFound,
    ResourceReadError,
    get_profile,
    load,
)

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


def get_allowed_origins():
    """
    Origins allowed to fetch files cross-origin.
    Configured via CORS_ALLOWED_ORIGINS (comma-separated).
    """
    allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
    if allowed_origins_env:
        return [o.strip() for o in allowed_origins_env.split(",") if o.strip()]
    # sensible defaults for local dev
    return [
        f"http://localhost:{DEFAULT_PORT}",
        f"http://127.0.0.1:{DEFAULT_PORT}",
    ]


def create_app(static_root=None, profile_name=None) -> Flask:
    """
    Build the static file server.

    Args:
        static_root: Directory to serve (default: STATIC_ROOT or the current directory)
        profile_name: MIME/routing profile (default: STATIC_PROFILE or 'basic')
    """
    root = os.path.abspath(static_root or os.getenv("STATIC_ROOT") or os.getcwd())
    profile = get_profile(profile_name or os.getenv("STATIC_PROFILE"))

    # Flask's own /static route would shadow files of the same name
    app = Flask(__name__, static_folder=None)
    app.config["STATIC_ROOT"] = root
    app.config["STATIC_PROFILE"] = profile.name

    CORS(app, resources={r"/*": {"origins": get_allowed_origins()}})

    @app.route("/", defaults={"filename": ""}, methods=["GET"])
    @app.route("/<path:filename>", methods=["GET"])
    def serve_file(filename):
        """
        Return the file at <filename> relative to the served root.

        Returns:
        - 200: file bytes with a guessed Content-Type
        - 404: file does not exist
        - 500: any other filesystem error
        """
        if profile.log_requests:
            logger.info(f"Request: {request.full_path.rstrip('?')}")

        try:
            content, content_type = load(root, filename, profile)
        except ResourceNotFound as e:
            if profile.log_requests:
                logger.error(f"File not found: {e.path}")
            return Response("404 Not Found", status=404, mimetype="text/plain")
        except ResourceReadError as e:
            logger.error(f"Server error: {e.code} ({e.path})")
            return Response(profile.server_error_body(e.code), status=500, mimetype="text/plain")

        return Response(content, status=200, content_type=content_type)

    logger.info(f"Serving {root} with the '{profile.name}' profile")
    return app


if __name__ == "__main__":
    app = create_app()
    host = os.getenv("HOST", DEFAULT_HOST)
    port = int(os.getenv("PORT", DEFAULT_PORT))
    logger.info(f"Server running at http://{host}:{port}/")
    app.run(host=host, port=port, debug=bool(os.getenv("FLASK_DEBUG")))
