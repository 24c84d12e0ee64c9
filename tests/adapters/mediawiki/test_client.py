from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest

from nvrsync.adapters.mediawiki import MediaWikiAPIError, MediaWikiSession
from nvrsync.config import BotCredentials, ResilienceConfig
from tests.support.http import json_response, make_client_factory, request_params

CONFIG = ResilienceConfig(name="test-wiki", base_url="https://wiki.test/w/api.php")
CREDENTIALS = BotCredentials(username="Bot@nvr", password="secret", email="bot@example.org")


class FakeWiki:
    """Scripted MediaWiki API: login, tokens and one write action."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, dict[str, str]]] = []
        self.write_responses: list[dict[str, object]] = []
        self.csrf_tokens = iter(["csrf-1+\\", "csrf-2+\\"])

    def __call__(self, request: httpx.Request) -> httpx.Response:
        params = request_params(request)
        self.requests.append((request.method, params))
        action = params.get("action")
        if action == "query" and params.get("meta") == "tokens":
            if params.get("type") == "login":
                return json_response({"query": {"tokens": {"logintoken": "login+\\"}}})
            return json_response({"query": {"tokens": {"csrftoken": next(self.csrf_tokens)}}})
        if action == "login":
            return json_response({"login": {"result": "Success", "lgusername": "Bot"}})
        if request.method == "POST":
            return json_response(self.write_responses.pop(0))
        return json_response({"query": {"pages": []}})

    def writes(self) -> list[dict[str, str]]:
        return [
            params
            for method, params in self.requests
            if method == "POST" and params["action"] not in {"login"}
        ]


@pytest.fixture
def wiki() -> FakeWiki:
    return FakeWiki()


@pytest.fixture
def session(wiki: FakeWiki) -> Iterator[MediaWikiSession]:
    with MediaWikiSession(
        config=CONFIG,
        credentials=CREDENTIALS,
        maxlag=10,
        maxlag_wait_seconds=0.0,
        client_factory=make_client_factory(wiki),
    ) as session:
        yield session


def test_get_requests_json_format_version_two(session: MediaWikiSession, wiki: FakeWiki) -> None:
    payload = session.get({"action": "query", "titles": "Data:Example.map"})

    assert payload == {"query": {"pages": []}}
    method, params = wiki.requests[0]
    assert method == "GET"
    assert params["format"] == "json"
    assert params["formatversion"] == "2"


def test_post_logs_in_and_attaches_token(session: MediaWikiSession, wiki: FakeWiki) -> None:
    wiki.write_responses.append({"edit": {"result": "Success"}})

    session.post({"action": "edit", "title": "Data:Example.map", "text": "{}"})

    actions = [params["action"] for _, params in wiki.requests]
    assert actions == ["query", "login", "query", "edit"]
    login = wiki.requests[1][1]
    assert (login["lgname"], login["lgpassword"], login["lgtoken"]) == (
        "Bot@nvr",
        "secret",
        "login+\\",
    )
    [edit] = wiki.writes()
    assert edit["token"] == "csrf-1+\\"
    assert edit["bot"] == "1"
    assert edit["maxlag"] == "10"


def test_login_happens_once(session: MediaWikiSession, wiki: FakeWiki) -> None:
    wiki.write_responses.extend([{"edit": {"result": "Success"}}] * 2)

    session.post({"action": "edit", "title": "A", "text": "1"})
    session.post({"action": "edit", "title": "B", "text": "2"})

    actions = [params["action"] for _, params in wiki.requests]
    assert actions.count("login") == 1
    assert len(wiki.writes()) == 2


def test_api_error_is_raised(session: MediaWikiSession, wiki: FakeWiki) -> None:
    wiki.write_responses.append({"error": {"code": "protectedpage", "info": "Protected"}})

    with pytest.raises(MediaWikiAPIError) as exc:
        session.post({"action": "edit", "title": "A", "text": "1"})

    assert exc.value.code == "protectedpage"


def test_maxlag_is_retried(session: MediaWikiSession, wiki: FakeWiki) -> None:
    wiki.write_responses.extend(
        [
            {"error": {"code": "maxlag", "info": "Waiting for replicas: 12 seconds lagged"}},
            {"edit": {"result": "Success"}},
        ]
    )

    payload = session.post({"action": "edit", "title": "A", "text": "1"})

    assert payload == {"edit": {"result": "Success"}}
    assert len(wiki.writes()) == 2


def test_bad_token_is_refreshed_once(session: MediaWikiSession, wiki: FakeWiki) -> None:
    wiki.write_responses.extend(
        [
            {"error": {"code": "badtoken", "info": "Invalid CSRF token."}},
            {"edit": {"result": "Success"}},
        ]
    )

    session.post({"action": "edit", "title": "A", "text": "1"})

    first, second = wiki.writes()
    assert first["token"] == "csrf-1+\\"
    assert second["token"] == "csrf-2+\\"


def test_failed_login_is_reported(wiki: FakeWiki) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        if request_params(request).get("action") == "login":
            return json_response({"login": {"result": "Failed", "reason": "Incorrect password"}})
        return wiki(request)

    with (
        MediaWikiSession(
            config=CONFIG, credentials=CREDENTIALS, client_factory=make_client_factory(refuse)
        ) as session,
        pytest.raises(MediaWikiAPIError, match="Incorrect password"),
    ):
        session.login()
