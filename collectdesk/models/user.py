from functools import wraps

from flask import current_app
from flask_login import UserMixin, current_user
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from werkzeug.security import generate_password_hash, check_password_hash

from collectdesk import db, login_manager
from collectdesk.errors import Unauthorized


class UserRole:
    """User role constants."""
    ADMIN = "admin"


class User(UserMixin, db.Model):
    """Back-office accounts. Only administrators may manage collectors."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256))
    role = db.Column(db.String(20), default=UserRole.ADMIN, nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.email}>"


def _admin_serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt="admin-auth")


def issue_admin_token(user: User) -> str:
    """Return a bearer token identifying *user* for the admin API."""
    return _admin_serializer().dumps(user.id)


def load_admin_token(token: str) -> User | None:
    """Resolve an admin bearer token to an active user, or None."""
    try:
        user_id = _admin_serializer().loads(
            token, max_age=current_app.config["ADMIN_TOKEN_MAX_AGE"]
        )
    except (SignatureExpired, BadSignature):
        return None
    user = db.session.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user


def admin_required(f):
    """Decorator to require an authenticated administrator for a route."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            raise Unauthorized()
        return f(*args, **kwargs)
    return decorated_function


@login_manager.user_loader
def load_user(id):
    return db.session.get(User, int(id))


@login_manager.request_loader
def load_user_from_request(req):
    auth_header = req.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return load_admin_token(token.strip())


@login_manager.unauthorized_handler
def unauthorized():
    return {"error": Unauthorized.message}, 401
