import pytest
from flask import g
from flask.testing import FlaskClient

from collectdesk import create_app, db
from collectdesk.config import TestingConfig
from collectdesk.models import Collector, Settings, Submission, User, UserRole
from collectdesk.models.user import issue_admin_token
from collectdesk.services.passwords import hash_password


class FreshUserClient(FlaskClient):
    """Test client that re-resolves the logged-in user on every request.

    The app context stays pushed for the whole test, so Flask-Login's
    cached user on ``g`` would otherwise leak between requests.
    """

    def open(self, *args, **kwargs):
        g.pop("_login_user", None)
        return super().open(*args, **kwargs)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    app.test_client_class = FreshUserClient
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    user = User(email="admin@example.com", role=UserRole.ADMIN)
    user.set_password("admin-password")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {issue_admin_token(admin)}"}


@pytest.fixture
def make_collector(app):
    def _make(name="ali", password="secret", is_active=True):
        collector = Collector(
            name=name,
            is_active=is_active,
            password_hash=hash_password(password) if password else None,
        )
        db.session.add(collector)
        db.session.commit()
        return collector
    return _make


@pytest.fixture
def make_submissions(app):
    def _make(collector_name, count):
        submissions = [
            Submission(
                full_name=f"Person {i}",
                phone_number=f"0100000{i:04d}",
                collector_name=collector_name,
            )
            for i in range(count)
        ]
        db.session.add_all(submissions)
        db.session.commit()
        return submissions
    return _make


@pytest.fixture
def pricing(app):
    def _set(service_price, commission_amount):
        Settings.set("service_price", str(service_price), commit=False)
        Settings.set("commission_amount", str(commission_amount), commit=False)
        db.session.commit()
    return _set


@pytest.fixture
def login(client):
    def _login(name="ali", password="secret"):
        response = client.post(
            "/functions/collector-auth",
            json={"action": "login", "name": name, "password": password},
        )
        assert response.status_code == 200, response.get_json()
        return response.get_json()["token"]
    return _login
