import logging
import os
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_marshmallow import Marshmallow
from flask_bcrypt import Bcrypt
from flask_mail import Mail
from flask_login import LoginManager


def _env_flag(name, default=False):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


load_dotenv()

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///athenas.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'change-me-please')
app.config['ADMIN_USERNAME'] = os.environ.get('ADMIN_USERNAME', 'admin')
app.config['ADMIN_PASSWORD'] = os.environ.get('ADMIN_PASSWORD')
app.config['ADMIN_PASSWORD_HASH'] = os.environ.get('ADMIN_PASSWORD_HASH')
app.config['AUTH_COOKIE_NAME'] = 'auth-token'
app.config['AUTH_TOKEN_MAX_AGE'] = timedelta(days=7)
app.config['AUTH_COOKIE_SECURE'] = _env_flag('AUTH_COOKIE_SECURE')
app.config['BCRYPT_LOG_ROUNDS'] = int(os.environ.get('BCRYPT_LOG_ROUNDS', '12'))
app.config['WTF_CSRF_ENABLED'] = _env_flag('WTF_CSRF_ENABLED', True)
app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(days=int(os.environ.get('WISHLIST_LIFETIME_DAYS', '365')))
app.config['TESTING'] = _env_flag('TESTING')
db = SQLAlchemy(app)
bcrypt = Bcrypt(app)
app.config['MAIL_SERVER'] = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
app.config['MAIL_PORT'] = int(os.environ.get('MAIL_PORT', '465'))
app.config['MAIL_USE_TLS'] = _env_flag('MAIL_USE_TLS')
app.config['MAIL_USE_SSL'] = _env_flag('MAIL_USE_SSL', True)
app.config['MAIL_USERNAME'] = os.environ.get('MAIL_USERNAME')
app.config['MAIL_PASSWORD'] = os.environ.get('MAIL_PASSWORD')
app.config['MAIL_DEFAULT_SENDER'] = os.environ.get('MAIL_DEFAULT_SENDER') or app.config['MAIL_USERNAME']
app.config['MAIL_SUPPRESS_SEND'] = _env_flag('MAIL_SUPPRESS_SEND', app.config['TESTING'])
# Where quote requests and contact messages are delivered.
app.config['BUSINESS_EMAIL'] = os.environ.get('BUSINESS_EMAIL')
mail = Mail(app)
ma = Marshmallow(app)
login_manager = LoginManager(app)
login_manager.login_view = 'dashboard_login'


def _configure_logging(flask_app):
    level_name = os.environ.get('LOG_LEVEL', 'DEBUG' if flask_app.debug else 'INFO')
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
    flask_app.logger.handlers.clear()
    flask_app.logger.addHandler(handler)
    flask_app.logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))


_configure_logging(app)

from athenas import routes  # noqa: E402,F401
from athenas import seed  # noqa: E402,F401
