from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from collectdesk import db
from collectdesk.errors import NothingToBatch
from collectdesk.models import Batch, Submission
from collectdesk.services import CollectorDataService
from collectdesk.services.tokens import issue_token, now_ms


def post_data(client, **body):
    return client.post("/functions/collector-data", json=body)


def test_missing_token(client):
    response = post_data(client)
    assert response.status_code == 401
    assert "error" in response.get_json()


def test_invalid_token(client):
    assert post_data(client, token="forged.token").status_code == 401
    assert post_data(client, token="forged.token", action="create_batch").status_code == 401


def test_expired_token(app, client, make_collector):
    collector = make_collector("ali", "secret")
    token = issue_token(
        {"collector_id": collector.id, "collector_name": "ali", "exp": now_ms() - 1},
        app.config["COLLECTOR_TOKEN_SECRET"],
    )
    response = post_data(client, token=token)
    assert response.status_code == 401
    assert "expired" in response.get_json()["error"]


def test_token_signed_with_other_secret(app, client, make_collector):
    make_collector("ali", "secret")
    token = issue_token(
        {"collector_id": 1, "collector_name": "ali", "exp": now_ms() + 60_000},
        app.config["SECRET_KEY"],
    )
    assert post_data(client, token=token).status_code == 401


def test_preflight(client):
    response = client.options(
        "/functions/collector-data",
        headers={
            "Origin": "https://collect.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )
    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "POST" in response.headers["Access-Control-Allow-Methods"]


def test_fetch_returns_only_own_data(client, make_collector, make_submissions, pricing, login):
    make_collector("ali", "secret")
    make_collector("mona", "secret")
    make_submissions("ali", 3)
    make_submissions("mona", 2)
    pricing("25", "5")

    response = post_data(client, token=login("ali"))

    assert response.status_code == 200
    data = response.get_json()
    assert data["collector_name"] == "ali"
    assert data["total"] == 3
    assert len(data["submissions"]) == 3
    assert {s["collector_name"] for s in data["submissions"]} == {"ali"}
    assert data["batches"] == []
    assert Decimal(data["service_price"]) == Decimal("25")
    assert Decimal(data["commission_amount"]) == Decimal("5")


def test_fetch_orders_newest_first(client, make_collector, make_submissions, login):
    make_collector("ali", "secret")
    submissions = make_submissions("ali", 3)

    data = post_data(client, token=login("ali")).get_json()

    assert [s["id"] for s in data["submissions"]] == [s.id for s in reversed(submissions)]


def test_fetch_reflects_batch_and_delivery_state(client, make_collector, make_submissions, pricing, login):
    make_collector("ali", "secret")
    make_submissions("ali", 2)
    pricing("10", "2")
    token = login("ali")
    batch_id = post_data(client, token=token, action="create_batch").get_json()["batch_id"]

    data = post_data(client, token=token, action="fetch").get_json()

    assert all(s["batch_id"] == batch_id for s in data["submissions"])
    assert all(s["is_delivered"] is False for s in data["submissions"])
    assert data["batches"][0]["id"] == batch_id
    assert data["batches"][0]["is_delivered"] is False


def test_create_batch_totals(client, make_collector, make_submissions, pricing, login):
    make_collector("ali", "secret")
    submissions = make_submissions("ali", 4)
    pricing("25", "5")

    response = post_data(client, token=login("ali"), action="create_batch")

    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["count"] == 4

    batch = db.session.get(Batch, data["batch_id"])
    assert batch.collector_name == "ali"
    assert batch.submissions_count == 4
    assert batch.total_amount == Decimal("100")
    assert batch.commission_amount == Decimal("20")
    assert batch.net_amount == Decimal("80")
    assert batch.is_delivered is False
    assert batch.delivered_at is None

    db.session.expire_all()
    assert {s.batch_id for s in Submission.query.filter_by(collector_name="ali")} == {batch.id}
    assert len(submissions) == 4


def test_create_batch_twice_has_nothing_to_batch(client, make_collector, make_submissions, login):
    make_collector("ali", "secret")
    make_submissions("ali", 2)
    token = login("ali")

    first = post_data(client, token=token, action="create_batch")
    second = post_data(client, token=token, action="create_batch")

    assert first.status_code == 200
    assert second.status_code == 400
    assert "error" in second.get_json()
    assert Batch.query.count() == 1


def test_create_batch_with_no_submissions(client, make_collector, login):
    make_collector("ali", "secret")
    response = post_data(client, token=login("ali"), action="create_batch")
    assert response.status_code == 400
    assert Batch.query.count() == 0


def test_create_batch_only_takes_new_submissions(client, make_collector, make_submissions, pricing, login):
    make_collector("ali", "secret")
    make_submissions("ali", 2)
    pricing("10", "1")
    token = login("ali")
    post_data(client, token=token, action="create_batch")

    make_submissions("ali", 3)
    data = post_data(client, token=token, action="create_batch").get_json()

    assert data["count"] == 3
    assert db.session.get(Batch, data["batch_id"]).total_amount == Decimal("30")


def test_create_batch_ignores_other_collectors(client, make_collector, make_submissions, login):
    make_collector("ali", "secret")
    make_collector("mona", "secret")
    make_submissions("ali", 1)
    make_submissions("mona", 5)

    data = post_data(client, token=login("ali"), action="create_batch").get_json()

    assert data["count"] == 1
    db.session.expire_all()
    assert Submission.query.filter_by(collector_name="mona", batch_id=None).count() == 5


def test_batches_keep_their_prices_after_pricing_changes(
    client, make_collector, make_submissions, pricing, login
):
    make_collector("ali", "secret")
    make_submissions("ali", 2)
    pricing("25", "5")
    token = login("ali")
    batch_id = post_data(client, token=token, action="create_batch").get_json()["batch_id"]

    pricing("40", "10")
    data = post_data(client, token=token).get_json()

    batch = next(b for b in data["batches"] if b["id"] == batch_id)
    assert Decimal(batch["total_amount"]) == Decimal("50")
    assert Decimal(batch["net_amount"]) == Decimal("40")
    assert Decimal(data["service_price"]) == Decimal("40")


def test_decimal_prices_are_exact(client, make_collector, make_submissions, pricing, login):
    make_collector("ali", "secret")
    make_submissions("ali", 3)
    pricing("0.10", "0.03")

    batch_id = post_data(client, token=login("ali"), action="create_batch").get_json()["batch_id"]

    batch = db.session.get(Batch, batch_id)
    assert batch.total_amount == Decimal("0.30")
    assert batch.commission_amount == Decimal("0.09")
    assert batch.net_amount == Decimal("0.21")


def test_concurrent_create_batch_never_double_counts(
    app, make_collector, make_submissions, pricing, monkeypatch
):
    make_collector("ali", "secret")
    make_submissions("ali", 5)
    pricing("25", "5")

    # Both calls observe the same pending selection, as if they had read
    # before either one wrote.
    stale_ids = CollectorDataService._pending_submission_ids("ali")
    monkeypatch.setattr(
        CollectorDataService, "_pending_submission_ids", staticmethod(lambda name: list(stale_ids))
    )

    first = CollectorDataService.create_batch("ali")
    with pytest.raises(NothingToBatch):
        CollectorDataService.create_batch("ali")

    assert first["count"] == 5
    assert Batch.query.count() == 1

    db.session.expire_all()
    claimed = Submission.query.filter(Submission.batch_id.isnot(None)).count()
    assert claimed == 5
    assert sum(b.submissions_count for b in Batch.query) == claimed


def test_overlapping_claims_count_only_claimed_rows(
    app, make_collector, make_submissions, pricing, monkeypatch
):
    make_collector("ali", "secret")
    early = make_submissions("ali", 2)
    pricing("25", "5")
    stale_ids = [s.id for s in early]

    CollectorDataService.create_batch("ali")
    late = make_submissions("ali", 3)

    # A slow request still holding the old selection plus the new rows
    monkeypatch.setattr(
        CollectorDataService,
        "_pending_submission_ids",
        staticmethod(lambda name: stale_ids + [s.id for s in late]),
    )
    result = CollectorDataService.create_batch("ali")

    assert result["count"] == 3
    batch = db.session.get(Batch, result["batch_id"])
    assert batch.submissions_count == 3
    assert batch.total_amount == Decimal("75")
    db.session.expire_all()
    assert Submission.query.filter_by(batch_id=batch.id).count() == 3
    assert sum(b.submissions_count for b in Batch.query) == 5


def test_failed_claim_leaves_no_batch_and_can_be_retried(
    client, make_collector, make_submissions, pricing, login, monkeypatch
):
    make_collector("ali", "secret")
    make_submissions("ali", 3)
    pricing("25", "5")
    token = login("ali")

    def failing_execute(statement, *args, **kwargs):
        raise OperationalError("UPDATE submissions", {}, Exception("connection lost"))

    monkeypatch.setattr(db.session, "execute", failing_execute)
    response = post_data(client, token=token, action="create_batch")
    monkeypatch.undo()

    assert response.status_code == 500
    assert "error" in response.get_json()
    assert Batch.query.count() == 0
    assert Submission.query.filter_by(collector_name="ali", batch_id=None).count() == 3

    retry = post_data(client, token=token, action="create_batch")

    assert retry.status_code == 200
    assert retry.get_json()["count"] == 3
    batch = db.session.get(Batch, retry.get_json()["batch_id"])
    assert batch.total_amount == Decimal("75")
    assert Batch.query.count() == 1
