"""Flask application factory."""

from flask import Flask


def create_app() -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    from wishlist_planner.api.middleware import register_middleware
    register_middleware(app)

    from wishlist_planner.api.wishlist_bp import wishlist_bp

    app.register_blueprint(wishlist_bp, url_prefix="/api")

    return app
