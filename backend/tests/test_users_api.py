from conftest import PASSWORD


def register(client, email="resident@mcqprep.in", **extra):
    payload = {"name": "Dr. Resident", "email": email, "password": "s3cure-pass"}
    payload.update(extra)
    return client.post("/api/v1/auth/register", json=payload)


def test_register_returns_tokens(client):
    response = register(client, profileData={"college": "KEM Mumbai", "targetExam": "NEET SS"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["accessToken"] and data["refreshToken"]
    assert data["user"]["subscriptionType"] == "free"
    assert data["user"]["profileData"]["college"] == "KEM Mumbai"
    assert "hashedPassword" not in data["user"]


def test_duplicate_email_conflicts(client):
    register(client)
    response = register(client, email="Resident@mcqprep.in")
    assert response.status_code == 409


def test_register_validates_body(client):
    response = register(client, email="not-an-email", password="123")
    assert response.status_code == 400
    assert {e["field"] for e in response.json()["errors"]} == {"email", "password"}


def test_login_with_form_data(client, free_user):
    response = client.post("/api/v1/auth/token", data={"username": free_user.email, "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"

    bad = client.post("/api/v1/auth/token", data={"username": free_user.email, "password": "wrong"})
    assert bad.status_code == 401


def test_refresh_token_issues_new_access_token(client):
    tokens = register(client).json()["data"]

    refreshed = client.post("/api/v1/auth/refresh-token", json={"refresh_token": tokens["refreshToken"]})
    assert refreshed.status_code == 200

    # An access token is not accepted as a refresh token
    rejected = client.post("/api/v1/auth/refresh-token", json={"refresh_token": tokens["accessToken"]})
    assert rejected.status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get("/api/v1/users/profile", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401
    assert response.json()["status"] == "error"


def test_profile_update(client, free_user, auth_headers):
    headers = auth_headers(free_user)
    response = client.put(
        "/api/v1/users/profile",
        json={"name": "Dr. Updated", "profileData": {"yearOfStudy": "MS 3rd year"}},
        headers=headers,
    )
    assert response.status_code == 200

    user = client.get("/api/v1/users/profile", headers=headers).json()["data"]["user"]
    assert user["name"] == "Dr. Updated"
    assert user["profileData"]["yearOfStudy"] == "MS 3rd year"


def test_dashboard_reflects_practice(client, make_mcq, free_user, auth_headers):
    headers = auth_headers(free_user)
    right = make_mcq(correct_answer=0, topic="Urology")
    wrong = make_mcq(correct_answer=0, topic="Urology")
    client.post(f"/api/v1/mcqs/{right.id}/submit", json={"selectedAnswer": 0, "timeSpent": 10}, headers=headers)
    client.post(f"/api/v1/mcqs/{wrong.id}/submit", json={"selectedAnswer": 2, "timeSpent": 10}, headers=headers)
    client.post(f"/api/v1/mcqs/{right.id}/bookmark", headers=headers)

    data = client.get("/api/v1/users/dashboard", headers=headers).json()["data"]

    assert data["stats"] == {
        "totalAttempted": 2,
        "correctAnswers": 1,
        "accuracy": 50.0,
        "totalBookmarks": 1,
        "mockTestsAttempted": 0,
    }
    assert data["topicPerformance"] == [{"topic": "Urology", "total": 2, "correct": 1, "accuracy": 50.0}]

    progress = client.get("/api/v1/users/progress", params={"timeframe": 7}, headers=headers).json()["data"]
    assert sum(day["total"] for day in progress["dailyProgress"]) == 2

    attempts = client.get("/api/v1/users/attempts", headers=headers).json()
    assert attempts["total"] == 2


def test_mock_test_history(client, make_mcq, make_mock_test, free_user, auth_headers):
    headers = auth_headers(free_user)
    question = make_mcq(correct_answer=0)
    mock_test = make_mock_test([question], title="Weekly Test 7")
    client.post(
        f"/api/v1/mock-tests/{mock_test.id}/submit",
        json={"answers": [{"mcq": question.id, "selectedAnswer": 0}], "startTime": "2026-01-01T10:00:00Z"},
        headers=headers,
    )

    history = client.get("/api/v1/users/mock-test-history", headers=headers).json()
    assert history["count"] == 1
    assert history["data"]["attempts"][0]["mockTest"]["title"] == "Weekly Test 7"
    assert history["data"]["attempts"][0]["score"] == 100.0
