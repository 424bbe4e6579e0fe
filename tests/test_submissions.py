import pytest

from collectdesk import db
from collectdesk.models import Submission


def test_public_submission_is_unattributed(client):
    response = client.post(
        "/submissions", json={"full_name": "  Sara Ahmed ", "phone_number": "+20 100 123 4567"}
    )

    assert response.status_code == 201
    submission = db.session.get(Submission, response.get_json()["id"])
    assert submission.full_name == "Sara Ahmed"
    assert submission.collector_name is None
    assert submission.batch_id is None
    assert submission.is_delivered is False


def test_submission_with_token_is_attributed(client, make_collector, login):
    make_collector("ali", "secret")

    response = client.post(
        "/submissions",
        json={"full_name": "Sara", "phone_number": "01001234567", "token": login("ali")},
    )

    assert response.status_code == 201
    assert Submission.query.one().collector_name == "ali"


def test_submission_with_bad_token_is_rejected(client):
    response = client.post(
        "/submissions", json={"full_name": "Sara", "phone_number": "01001234567", "token": "x.y"}
    )
    assert response.status_code == 401
    assert Submission.query.count() == 0


@pytest.mark.parametrize(
    "body",
    [
        {"full_name": "S", "phone_number": "01001234567"},
        {"full_name": "x" * 101, "phone_number": "01001234567"},
        {"full_name": "Sara", "phone_number": "1234567"},
        {"full_name": "Sara", "phone_number": "0100-CALL-NOW"},
        {"full_name": "Sara", "phone_number": "1" * 21},
        {"full_name": None, "phone_number": "01001234567"},
        {"full_name": "Sara"},
    ],
)
def test_submission_validation(client, body):
    response = client.post("/submissions", json=body)
    assert response.status_code == 400
    assert Submission.query.count() == 0
