from flask import Flask, request, g, flash, redirect, url_for, render_template
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
import logging
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Initialize Flask extensions
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message_category = 'info'
# Durable storage holds only the auth entries written by SessionStore
login_manager.session_protection = None
csrf = CSRFProtect()


@login_manager.request_loader
def load_user_from_session(req):
    store = g.get('session_store')
    if store is None:
        return None
    return store.snapshot().user


def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'default_secret_key_for_development')
    app.config['WTF_CSRF_ENABLED'] = True
    app.config['WTF_CSRF_SECRET_KEY'] = os.getenv('CSRF_SECRET_KEY', 'default_csrf_key_for_development')
    app.config['SESSION_COOKIE_HTTPONLY'] = True

    # REST backend configuration
    app.config['API_BASE_URL'] = os.getenv('API_BASE_URL', 'http://localhost:8000/api')
    app.config['API_TIMEOUT'] = float(os.getenv('API_TIMEOUT', 10))
    app.config['API_SESSION'] = None
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    # Initialize extensions with app
    login_manager.init_app(app)
    csrf.init_app(app)

    # Restore the session from the cookie on every page load
    @app.before_request
    def restore_session():
        # The chat assistant is client-local and never touches the session
        if request.endpoint == 'static' or request.blueprint == 'chat':
            return
        from bloodconnect.utils.api import ApiClient
        from bloodconnect.models.session import SessionStore, SessionStorage
        from bloodconnect.services.auth import AuthGateway
        from flask import session

        storage = SessionStorage(session._get_current_object())
        g.api = ApiClient(
            app.config['API_BASE_URL'],
            token_getter=lambda: storage.access_token,
            http=app.config.get('API_SESSION'),
            timeout=app.config['API_TIMEOUT'],
        )
        g.session_store = SessionStore(storage, AuthGateway(g.api))
        g.session_store.restore()

    from bloodconnect.utils.api import SessionExpired

    @app.errorhandler(SessionExpired)
    def handle_session_expired(error):
        store = g.get('session_store')
        if store is not None:
            store.logout()
        app.logger.info(f"Forced logout after expired token on {request.path}")
        flash('Your session has expired. Please log in again.', 'warning')
        return redirect(url_for('auth.login'))

    @app.errorhandler(404)
    def not_found(error):
        return render_template('errors/error.html', title='Not Found',
                               message='The page you are looking for does not exist.'), 404

    @app.errorhandler(500)
    def server_error(error):
        return render_template('errors/error.html', title='Server Error',
                               message='Something went wrong. Please try again.'), 500

    # Register blueprints
    from bloodconnect.routes.auth import auth
    from bloodconnect.routes.donor import donor
    from bloodconnect.routes.hospital import hospital
    from bloodconnect.routes.admin import admin
    from bloodconnect.routes.chat import chat
    from bloodconnect.routes.main import main

    app.register_blueprint(auth, url_prefix='/auth')
    app.register_blueprint(donor, url_prefix='/donor')
    app.register_blueprint(hospital, url_prefix='/hospital')
    app.register_blueprint(admin, url_prefix='/admin')
    app.register_blueprint(chat, url_prefix='/chat')
    # The assistant keeps no session state, so its JSON posts carry no token
    csrf.exempt(chat)
    app.register_blueprint(main)

    from bloodconnect.routes.chat import chat_command
    app.cli.add_command(chat_command)

    return app
