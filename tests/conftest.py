"""Test configuration"""

import smtplib

import httpx
import pytest
from fastapi.testclient import TestClient

from dsa_tracker.backend.app import create_app
from dsa_tracker.backend.config import INSTANCE_PATH_ENV, Settings
from dsa_tracker.backend.integrations.platforms import PlatformClient


class FakeEmailService:
    """Records outgoing mail instead of talking to SMTP"""

    def __init__(self):
        self.codes: dict[str, str] = {}
        self.sent: list[tuple[str, str]] = []
        self.fail = False
        self.fail_welcome = False

    async def send_verification_code(self, to_email: str, code: str, name: str) -> bool:
        self.codes[to_email] = code
        if self.fail:
            return False
        self.sent.append(("verification", to_email))
        return True

    async def send_welcome(self, to_email: str, name: str) -> bool:
        self.sent.append(("welcome", to_email))
        if self.fail_welcome:
            raise smtplib.SMTPServerDisconnected("Connection unexpectedly closed")
        return True


class PlatformStub:
    """In-memory LeetCode/Codeforces/GitHub APIs for ``httpx.MockTransport``"""

    def __init__(self):
        self.leetcode_users: dict[str, dict] = {}
        self.codeforces_users: dict[str, dict] = {}
        self.github_users: dict[str, tuple[dict, list]] = {}
        self.down: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host in self.down:
            return httpx.Response(503, json={"message": "Service Unavailable"})

        if host == "leetcode.test":
            username = request.url.path.strip("/")
            if username in self.leetcode_users:
                return httpx.Response(200, json={"status": "success", **self.leetcode_users[username]})
            return httpx.Response(200, json={"status": "error", "message": "user does not exist"})

        if host == "codeforces.test":
            handle = request.url.params.get("handles")
            if handle in self.codeforces_users:
                return httpx.Response(200, json={"status": "OK", "result": [self.codeforces_users[handle]]})
            return httpx.Response(
                400, json={"status": "FAILED", "comment": f"handles: User with handle {handle} not found"}
            )

        if host == "github.test":
            parts = request.url.path.strip("/").split("/")
            if parts[1] not in self.github_users:
                return httpx.Response(404, json={"message": "Not Found"})
            user, repos = self.github_users[parts[1]]
            return httpx.Response(200, json=repos if parts[-1] == "repos" else user)

        return httpx.Response(404)

    def add_leetcode(self, username: str, easy: int = 10, medium: int = 5, hard: int = 1) -> None:
        self.leetcode_users[username] = {
            "totalSolved": easy + medium + hard,
            "totalQuestions": 3000,
            "easySolved": easy,
            "totalEasy": 800,
            "mediumSolved": medium,
            "totalMedium": 1600,
            "hardSolved": hard,
            "totalHard": 600,
            "acceptanceRate": 61.5,
            "ranking": 123456,
        }

    def add_codeforces(self, handle: str, **fields) -> None:
        self.codeforces_users[handle] = {"handle": handle, **fields}

    def add_github(self, username: str, stars: list[int] = (), forks: list[int] = ()) -> None:
        user = {
            "login": username,
            "name": username.title(),
            "avatar_url": f"https://avatars.test/{username}",
            "bio": None,
            "public_repos": len(stars),
            "followers": 7,
            "following": 3,
            "html_url": f"https://github.com/{username}",
            "created_at": "2020-01-01T00:00:00Z",
        }
        repos = [
            {"stargazers_count": s, "forks_count": f}
            for s, f in zip(stars, forks)
        ]
        self.github_users[username] = (user, repos)


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings isolated from the developer's instance directory and .env"""
    monkeypatch.setenv(INSTANCE_PATH_ENV, str(tmp_path / "instance"))
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{(tmp_path / 'test.db').as_posix()}",
        secret_key="test-secret-key",
        leetcode_api_url="https://leetcode.test",
        codeforces_api_url="https://codeforces.test/api",
        github_api_url="https://github.test",
        platform_max_retries=1,
        platform_retry_backoff_seconds=0,
    )


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
def platform_stub() -> PlatformStub:
    return PlatformStub()


@pytest.fixture
def make_client(settings, email_service, platform_stub):
    """Build a started TestClient, optionally with settings overrides"""
    clients = []

    def _make(**overrides) -> TestClient:
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        app = create_app(
            app_settings,
            email_service=email_service,
            platform_client=PlatformClient(
                app_settings, transport=httpx.MockTransport(platform_stub.handler)
            ),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def signup(client, email_service):
    """Register and verify an account, returning its auth headers"""

    def _signup(email: str = "ann@example.com", password: str = "secret1", name: str = "Ann") -> dict:
        response = client.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text

        response = client.post(
            "/auth/verify-otp",
            json={"email": email, "otp": email_service.codes[email]},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}

    return _signup


@pytest.fixture
def auth_headers(signup) -> dict:
    return signup()
