import pytest

from sprint_app.core.jira_client import JiraAPI


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, pages):
        self.pages = list(pages)
        self.calls = []

    def get(self, url, params=None):
        self.calls.append((url, dict(params or {})))
        return self.pages.pop(0)


class FakeClient:
    def __init__(self, session):
        self._session = session


def _api(pages):
    api = JiraAPI.__new__(JiraAPI)
    api.server = "https://example.atlassian.net"
    api.client = FakeClient(FakeSession(pages))
    api._cache = {}
    api._cache_ttl = 300.0
    return api


def test_agile_pagination_follows_is_last():
    api = _api(
        [
            FakeResponse({"values": [{"id": 1}, {"id": 2}], "isLast": False}),
            FakeResponse({"values": [{"id": 3}], "isLast": True}),
        ]
    )
    sprints = api.fetch_sprints(7)
    assert [s["id"] for s in sprints] == [1, 2, 3]
    calls = api.client._session.calls
    assert calls[0][0].endswith("/rest/agile/1.0/board/7/sprint")
    assert calls[1][1]["startAt"] == 2


def test_boards_filtered_by_project():
    api = _api([FakeResponse({"values": [{"id": 1}], "isLast": True})])
    api.fetch_boards("ABC")
    assert api.client._session.calls[0][1]["projectKeyOrId"] == "ABC"


def test_search_pages_and_caches():
    api = _api(
        [
            FakeResponse({"issues": [{"key": "A-1"}], "nextPageToken": "t1"}),
            FakeResponse({"issues": [{"key": "A-2"}], "isLast": True}),
        ]
    )
    first = api.search_enhanced("sprint = 1", fields=["status"], expand=["changelog"])
    assert [i["key"] for i in first] == ["A-1", "A-2"]
    calls = api.client._session.calls
    assert calls[0][1]["fields"] == "status"
    assert calls[0][1]["expand"] == "changelog"
    assert calls[1][1]["nextPageToken"] == "t1"
    # Second call served from cache
    assert api.search_enhanced("sprint = 1", fields=["status"], expand=["changelog"]) == first
    assert len(calls) == 2


def test_count_issues():
    api = _api([FakeResponse({"issues": [{"key": "A-1"}, {"key": "A-2"}], "isLast": True})])
    assert api.count_issues('sprint = 1 AND status was "UAT Ready"') == 2


def test_http_errors_raise():
    api = _api([FakeResponse({"errorMessages": ["nope"]}, status_code=500)])
    with pytest.raises(RuntimeError, match="500"):
        api.search_enhanced("sprint = 1")
    api = _api([FakeResponse({}, status_code=404)])
    with pytest.raises(RuntimeError, match="404"):
        api.fetch_sprints(1)


def test_clear_cache():
    api = _api([])
    api._cache["x"] = (0.0, [])
    api.clear_cache()
    assert api._cache == {}


def test_changelog_pages_until_last():
    api = _api(
        [
            FakeResponse({"values": [{"id": "1"}, {"id": "2"}], "isLast": False, "total": 3}),
            FakeResponse({"values": [{"id": "3"}], "isLast": True, "total": 3}),
        ]
    )
    histories = api.fetch_changelog_raw("ABC-1")
    assert [h["id"] for h in histories] == ["1", "2", "3"]
    calls = api.client._session.calls
    assert calls[0][0] == "https://example.atlassian.net/rest/api/3/issue/ABC-1/changelog"
    assert calls[1][1]["startAt"] == 2


def test_changelog_http_error_raises():
    api = _api([FakeResponse({}, status_code=403)])
    with pytest.raises(RuntimeError, match="ABC-1 failed 403"):
        api.fetch_changelog_raw("ABC-1")
