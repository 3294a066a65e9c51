import logging
from flask import Flask, redirect, url_for
from routes.analytics_routes import analytics_bp
from config import SECRET_KEY, SNAPSHOT_FILE, LOG_LEVEL


def configure_logging(level=LOG_LEVEL):
    """Timestamped console logging for the whole process; safe to call twice."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(overrides=None):
    configure_logging()
    app = Flask(__name__)
    app.secret_key = SECRET_KEY
    app.config['SNAPSHOT_FILE'] = SNAPSHOT_FILE
    if overrides:
        app.config.update(overrides)
    app.register_blueprint(analytics_bp)

    @app.route('/')
    def home():
        return redirect(url_for('analytics.index'))

    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=True)
