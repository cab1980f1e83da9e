import os
from flask import Flask
from config import Config

from .queries import init_leaderboard
from .util.log_util import configure_logging


def create_app(config_class=Config):
    """Create the Flask app that serves the campaign leaderboard."""
    here = os.path.abspath(os.path.dirname(__file__))
    template_folder = os.path.join(here, '..', 'frontend', 'templates')
    static_folder = os.path.join(here, '..', 'frontend', 'static')
    app = Flask(__name__, template_folder=template_folder, static_folder=static_folder)
    app.config.from_object(config_class)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # dataset is loaded lazily on the first request
    init_leaderboard(app)

    # register blueprints
    from .routes import main_bp, api_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')

    return app
