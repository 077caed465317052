from datetime import datetime, timezone
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from speedtype.models.models import AttemptResult, User
from conftest import auth_headers, register


def submit(client: TestClient, account, **overrides):
    payload = {
        "userId": account["userId"],
        "wpm": 60,
        "accuracy": 95,
        "timeTaken": 45,
        "textLength": 200,
    }
    payload.update(overrides)
    return client.post("/results", json=payload, headers=auth_headers(account["token"]))


def test_scenario_two_attempts(client: TestClient):
    """Two attempts fold into best WPM, mean accuracy and a count of two."""
    account = register(client, email="ana@x.com")

    first = submit(client, account, wpm=80, accuracy=95, timeTaken=45, textLength=250)
    second = submit(client, account, wpm=100, accuracy=90, timeTaken=40, textLength=230)
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["resultId"] != second.json()["resultId"]

    response = client.get(
        f"/users/{account['userId']}/stats", headers=auth_headers(account["token"])
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user == {
        "username": "ana",
        "subscription": "free",
        "wpm": 100,
        "accuracy": 92.5,
        "testsTaken": 2,
    }


def test_aggregate_matches_history(client: TestClient, session: Session, account):
    """Best WPM is the maximum and average accuracy the mean of every attempt."""
    attempts = [(45, 80), (72, 97), (60, 91), (72, 88), (30, 100), (51, 76)]
    for wpm, accuracy in attempts:
        assert submit(client, account, wpm=wpm, accuracy=accuracy).status_code == 201

    user = session.get(User, account["userId"])
    session.refresh(user)
    assert user.best_wpm == 72
    assert abs(user.average_accuracy - sum(a for _, a in attempts) / len(attempts)) < 1e-9
    assert user.attempts_count == len(attempts)


def test_recent_results_newest_first(client: TestClient, account):
    ids = [submit(client, account, wpm=w).json()["resultId"] for w in range(10, 80, 10)]

    response = client.get(
        f"/users/{account['userId']}/stats", headers=auth_headers(account["token"])
    )
    recent = response.json()["recentResults"]
    assert len(recent) == 5
    assert [r["id"] for r in recent] == list(reversed(ids))[:5]
    assert [r["wpm"] for r in recent] == [70, 60, 50, 40, 30]
    assert set(recent[0]) == {
        "id",
        "wpm",
        "accuracy",
        "timeTaken",
        "textLength",
        "createdAt",
    }


def test_recent_results_order_survives_equal_timestamps(
    client: TestClient, session: Session, account
):
    """Attempts stored within the same clock tick still list newest first."""
    for wpm in (10, 20, 30):
        assert submit(client, account, wpm=wpm).status_code == 201

    same_instant = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for result in session.exec(select(AttemptResult)).all():
        result.created_at = same_instant
        session.add(result)
    session.commit()

    response = client.get(
        f"/users/{account['userId']}/stats", headers=auth_headers(account["token"])
    )
    assert [r["wpm"] for r in response.json()["recentResults"]] == [30, 20, 10]


def test_stats_without_results(client: TestClient, account):
    response = client.get(
        f"/users/{account['userId']}/stats", headers=auth_headers(account["token"])
    )
    assert response.status_code == 200
    assert response.json()["recentResults"] == []
    assert response.json()["user"]["testsTaken"] == 0


def test_stats_for_other_account_rejected(client: TestClient, account):
    other = register(client, username="bob", email="bob@example.com")
    response = client.get(
        f"/users/{other['userId']}/stats", headers=auth_headers(account["token"])
    )
    assert response.status_code == 401


def test_stats_for_unknown_account(client: TestClient, account):
    response = client.get("/users/missing/stats", headers=auth_headers(account["token"]))
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


def test_submit_requires_token(client: TestClient, account):
    response = client.post(
        "/results",
        json={
            "userId": account["userId"],
            "wpm": 50,
            "accuracy": 90,
            "timeTaken": 60,
            "textLength": 100,
        },
    )
    assert response.status_code == 401


def test_submit_for_other_account_rejected(
    client: TestClient, session: Session, account
):
    other = register(client, username="bob", email="bob@example.com")
    response = submit(client, account, userId=other["userId"])
    assert response.status_code == 401
    assert session.exec(select(AttemptResult)).all() == []


def test_submit_rejects_out_of_range_values(client: TestClient, account):
    assert submit(client, account, accuracy=101).status_code == 400
    assert submit(client, account, wpm=-1).status_code == 400
    assert submit(client, account, timeTaken=61).status_code == 400
    assert submit(client, account, textLength=0).status_code == 400


def test_duplicate_attempt_id_is_stored_once(
    client: TestClient, session: Session, account
):
    """Resending the same attempt returns the original id without double counting."""
    first = submit(client, account, attemptId="attempt-1", wpm=70)
    again = submit(client, account, attemptId="attempt-1", wpm=70)

    assert first.status_code == 201
    assert again.status_code == 200
    assert again.json()["resultId"] == first.json()["resultId"]

    user = session.get(User, account["userId"])
    session.refresh(user)
    assert user.attempts_count == 1
    assert len(session.exec(select(AttemptResult)).all()) == 1


def test_attempt_ids_are_scoped_per_account(client: TestClient, account):
    other = register(client, username="bob", email="bob@example.com")
    assert submit(client, account, attemptId="same").status_code == 201
    assert submit(client, other, attemptId="same").status_code == 201


def test_update_subscription(client: TestClient, account):
    headers = auth_headers(account["token"])
    response = client.patch(
        f"/users/{account['userId']}/subscription",
        json={"subscription": "pro"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["subscription"] == "pro"

    stats = client.get(f"/users/{account['userId']}/stats", headers=headers).json()
    assert stats["user"]["subscription"] == "pro"


def test_update_subscription_invalid_tier(client: TestClient, account):
    response = client.patch(
        f"/users/{account['userId']}/subscription",
        json={"subscription": "platinum"},
        headers=auth_headers(account["token"]),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid subscription type"


def test_update_subscription_for_other_account(client: TestClient, account):
    other = register(client, username="bob", email="bob@example.com")
    response = client.patch(
        f"/users/{other['userId']}/subscription",
        json={"subscription": "trainer"},
        headers=auth_headers(account["token"]),
    )
    assert response.status_code == 401
