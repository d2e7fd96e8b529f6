"""Account management and platform endpoints"""

import pytest


@pytest.fixture
def known_users(platform_stub):
    platform_stub.add_github("octo", stars=[5, 3, 0], forks=[1, 0, 2])
    platform_stub.add_leetcode("alice", easy=40, medium=25, hard=5)
    platform_stub.add_codeforces(
        "tourist",
        rating=3800,
        maxRating=4000,
        rank="legendary grandmaster",
        registrationTimeSeconds=1265987288,
    )
    return platform_stub


def test_get_profile(client, auth_headers):
    response = client.get("/user/profile", headers=auth_headers)
    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["email"] == "ann@example.com"
    assert profile["name"] == "Ann"
    assert profile["has_platform_data"] is False
    assert profile["platform_usernames"] is None
    assert "hashed_password" not in profile
    assert "verification_code" not in profile


def test_update_profile_merges_preferences(client, auth_headers):
    response = client.put(
        "/user/profile",
        json={"preferences": {"dark_mode": True}},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["preferences"] == {"dark_mode": True, "notifications": True}

    response = client.put("/user/profile", json={"name": "  Annie  "}, headers=auth_headers)
    data = response.json()["data"]
    assert data["name"] == "Annie"
    assert data["preferences"]["dark_mode"] is True


def test_update_profile_rejects_blank_name(client, auth_headers):
    response = client.put("/user/profile", json={"name": "  "}, headers=auth_headers)
    assert response.status_code == 400


def test_change_password(client, auth_headers):
    wrong = client.put(
        "/user/password",
        json={"current_password": "nope", "new_password": "secret2"},
        headers=auth_headers,
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    short = client.put(
        "/user/password",
        json={"current_password": "secret1", "new_password": "12345"},
        headers=auth_headers,
    )
    assert short.status_code == 400
    assert short.json()["error"]["code"] == "VALIDATION_ERROR"

    ok = client.put(
        "/user/password",
        json={"current_password": "secret1", "new_password": "secret2"},
        headers=auth_headers,
    )
    assert ok.status_code == 200

    login = {"email": "ann@example.com"}
    assert client.post("/auth/login", json={**login, "password": "secret1"}).status_code == 400
    assert client.post("/auth/login", json={**login, "password": "secret2"}).status_code == 200


def test_delete_account_removes_questions(client, signup):
    """Deletion needs the password and takes every owned question along"""
    ann = signup("ann@example.com")
    bob = signup("bob@example.com")
    for title in ("Two Sum", "3Sum"):
        client.post("/questions", json={"title": title, "link": "https://leetcode.com/x"}, headers=ann)
    client.post("/questions", json={"title": "Bob's", "link": "https://leetcode.com/y"}, headers=bob)

    wrong = client.request("DELETE", "/user/account", json={"password": "nope"}, headers=ann)
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Password is incorrect"

    response = client.request("DELETE", "/user/account", json={"password": "secret1"}, headers=ann)
    assert response.status_code == 200

    assert client.get("/auth/me", headers=ann).status_code == 401
    assert client.get("/questions", headers=bob).json()["data"]["total"] == 1

    fresh = signup("ann@example.com")
    assert client.get("/questions", headers=fresh).json()["data"]["total"] == 0


def test_submit_platform_usernames(client, auth_headers, known_users):
    response = client.post(
        "/user/platform-usernames",
        json={"github": "octo", "leetcode": "alice"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["has_platform_data"] is True
    assert data["platform_usernames"] == {"github": "octo", "leetcode": "alice", "codeforces": None}

    again = client.post(
        "/user/platform-usernames",
        json={"codeforces": "tourist"},
        headers=auth_headers,
    )
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "CONFLICT"
    assert again.json()["error"]["details"] == {"already_exists": True}


def test_submit_requires_a_username(client, auth_headers):
    for payload in ({}, {"github": "", "leetcode": "   "}):
        response = client.post("/user/platform-usernames", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "At least one platform username is required"


def test_submit_invalid_username_stores_nothing(client, auth_headers, known_users):
    response = client.post(
        "/user/platform-usernames",
        json={"github": "octo", "leetcode": "ghost"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]["github"] == {"valid": True}
    assert error["details"]["leetcode"]["valid"] is False

    profile = client.get("/user/profile", headers=auth_headers).json()["data"]
    assert profile["has_platform_data"] is False
    assert profile["platform_usernames"] is None


def test_submit_with_platform_down_is_invalid(client, auth_headers, known_users):
    known_users.down.add("codeforces.test")
    response = client.post(
        "/user/platform-usernames",
        json={"codeforces": "tourist"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["details"]["codeforces"]["valid"] is False


def test_update_platform_usernames_merges(client, auth_headers, known_users):
    client.post(
        "/user/platform-usernames",
        json={"github": "octo", "leetcode": "alice"},
        headers=auth_headers,
    )
    known_users.requests.clear()

    response = client.put(
        "/user/platform-usernames",
        json={"github": "octo", "leetcode": "", "codeforces": "tourist"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["platform_usernames"] == {
        "github": "octo",
        "leetcode": None,
        "codeforces": "tourist",
    }
    # only the changed username is checked upstream
    assert {request.url.host for request in known_users.requests} == {"codeforces.test"}


def test_update_platform_usernames_rejects_unknown(client, auth_headers, known_users):
    client.post("/user/platform-usernames", json={"github": "octo"}, headers=auth_headers)

    response = client.put("/user/platform-usernames", json={"github": "nobody"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"]["details"]["github"]["error"] == "GitHub username not found"

    profile = client.get("/user/profile", headers=auth_headers).json()["data"]
    assert profile["platform_usernames"]["github"] == "octo"


def test_update_without_prior_submission(client, auth_headers, known_users):
    response = client.put("/user/platform-usernames", json={"leetcode": "alice"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["has_platform_data"] is True


def test_platform_stats(client, auth_headers, known_users):
    client.post(
        "/user/platform-usernames",
        json={"github": "octo", "leetcode": "alice", "codeforces": "tourist"},
        headers=auth_headers,
    )

    response = client.get("/user/platform-stats", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["has_platform_data"] is True

    stats = data["stats"]
    assert stats["github"]["total_stars"] == 8
    assert stats["github"]["total_forks"] == 3
    assert stats["leetcode"]["total_solved"] == 70
    assert stats["leetcode"]["easy_solved"] == 40
    assert stats["codeforces"]["rating"] == 3800
    assert stats["codeforces"]["registration_time"] == 1265987288000


def test_platform_stats_partial_failure(client, auth_headers, known_users):
    """One failing platform does not hide the others"""
    client.post(
        "/user/platform-usernames",
        json={"github": "octo", "leetcode": "alice"},
        headers=auth_headers,
    )
    known_users.down.add("leetcode.test")
    del known_users.github_users["octo"]

    stats = client.get("/user/platform-stats", headers=auth_headers).json()["data"]["stats"]
    assert stats["leetcode"] == {"error": "Failed to fetch LeetCode stats"}
    assert stats["github"] == {"error": "GitHub user not found"}
    assert "codeforces" not in stats


def test_platform_stats_without_usernames(client, auth_headers):
    data = client.get("/user/platform-stats", headers=auth_headers).json()["data"]
    assert data["has_platform_data"] is False
    assert data["stats"] == {}


def test_user_routes_require_authentication(client):
    assert client.get("/user/profile").status_code == 401
    assert client.get("/user/platform-stats").status_code == 401


def test_leetcode_pass_through(client, known_users):
    response = client.get("/leetcode/alice")
    assert response.status_code == 200
    assert response.json()["data"] == {"easy": 40, "medium": 25, "hard": 5}

    assert client.get("/leetcode/ghost").status_code == 404

    known_users.down.add("leetcode.test")
    response = client.get("/leetcode/alice")
    assert response.status_code == 502
    assert response.json()["error"]["code"] == "UPSTREAM_UNAVAILABLE"


def test_codeforces_pass_through(client, known_users):
    response = client.get("/codeforce/tourist")
    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["handle"] == "tourist"
    assert profile["max_rank"] == "unrated"
    assert profile["registration_time"] == 1265987288000

    missing = client.get("/codeforce/ghost")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NOT_FOUND"

    known_users.down.add("codeforces.test")
    assert client.get("/codeforce/tourist").status_code == 502
