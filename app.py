#!/usr/bin/env python3
"""
HireAI Waitlist - Main application entry point
"""
import logging
import click
from flask import Flask, jsonify
from flask_login import LoginManager
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

import config
from models.admin import db
from utils.email_utils import mail
from utils.errors import WaitlistError, Internal
from migrations.create_tables import ensure_tables
from services import auth_service
from routes.waitlist import waitlist_bp
from routes.analytics import analytics_bp
from routes.admin import admin_bp

migrate = Migrate()
login_manager = LoginManager()


def create_app(test_config=None):
    """Create and configure the Flask application"""
    app = Flask(__name__)
    app.config.from_object(config)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db, directory='alembic')
    mail.init_app(app)
    login_manager.init_app(app)

    # Admins authenticate per request with a bearer token; there is no session login
    login_manager.request_loader(auth_service.load_admin_from_request)

    with app.app_context():
        ensure_tables()

    app.register_blueprint(waitlist_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(admin_bp)

    register_error_handlers(app)
    register_commands(app)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    return app


def register_error_handlers(app):
    @app.errorhandler(WaitlistError)
    def handle_waitlist_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({
            'status': 'fail' if error.code < 500 else 'error',
            'error': error.name.replace(' ', ''),
            'message': error.description
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {str(error)}")
        return jsonify(Internal().to_dict()), 500


def register_commands(app):
    @app.cli.command('create-super-admin')
    @click.option('--email', prompt=True)
    @click.option('--name', default='Super Admin')
    @click.password_option()
    def create_super_admin(email, name, password):
        """Create a super admin account."""
        admin = auth_service.create_admin(email=email, password=password, name=name, role='super_admin')
        click.echo(f"Super admin created: {admin.email}")


if __name__ == '__main__':
    create_app().run(debug=config.DEBUG)
