from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_cors import CORS

from collectdesk.config import Config

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
cors = CORS()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    cors.init_app(app)

    # Register blueprints
    from collectdesk.routes.collector_auth import bp as collector_auth_bp
    from collectdesk.routes.collector_data import bp as collector_data_bp
    from collectdesk.routes.submissions import bp as submissions_bp
    from collectdesk.routes.auth import bp as auth_bp
    from collectdesk.routes.admin import bp as admin_bp

    app.register_blueprint(collector_auth_bp, url_prefix="/functions/collector-auth")
    app.register_blueprint(collector_data_bp, url_prefix="/functions/collector-data")
    app.register_blueprint(submissions_bp, url_prefix="/submissions")
    app.register_blueprint(auth_bp, url_prefix="/admin")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    from collectdesk.cli import register_commands
    register_commands(app)

    # Import models so Flask-Migrate sees every table
    with app.app_context():
        from collectdesk.models import User, Collector, Submission, Batch, Settings  # noqa: F401

    return app
