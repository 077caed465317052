from fastapi.testclient import TestClient

from conftest import auth_headers, register


def post_result(client: TestClient, account, wpm: float, accuracy: float = 90):
    response = client.post(
        "/results",
        json={
            "userId": account["userId"],
            "wpm": wpm,
            "accuracy": accuracy,
            "timeTaken": 60,
            "textLength": 200,
        },
        headers=auth_headers(account["token"]),
    )
    assert response.status_code == 201


def test_new_account_not_listed(client: TestClient):
    """An account with no attempts has bestWpm 0 and is excluded."""
    register(client, email="ana@x.com")
    response = client.get("/leaderboard")
    assert response.status_code == 200
    assert response.json() == {"users": []}


def test_zero_wpm_attempts_not_listed(client: TestClient, account):
    post_result(client, account, wpm=0)
    assert client.get("/leaderboard").json() == {"users": []}


def test_leaderboard_is_sorted_and_limited(client: TestClient):
    for i in range(12):
        account = register(client, username=f"user{i}", email=f"user{i}@example.com")
        post_result(client, account, wpm=(i * 37) % 101 + 1)

    users = client.get("/leaderboard").json()["users"]
    assert len(users) == 10
    wpms = [u["wpm"] for u in users]
    assert wpms == sorted(wpms, reverse=True)
    assert all(w > 0 for w in wpms)


def test_leaderboard_projection(client: TestClient, account):
    post_result(client, account, wpm=80, accuracy=95)
    post_result(client, account, wpm=60, accuracy=90)

    users = client.get("/leaderboard").json()["users"]
    assert users == [
        {
            "username": "ana",
            "wpm": 80,
            "accuracy": 92.5,
            "testsTaken": 2,
            "subscription": "free",
        }
    ]
