from datetime import UTC, datetime

from sprint_app.core.mappers import map_board, map_issue, map_missing_estimate, map_sprint, parse_dt


def _raw_issue():
    return {
        "key": "ABC-1",
        "fields": {
            "summary": "Build the thing",
            "status": {"name": "Done"},
            "assignee": {"displayName": "Alice"},
            "timeoriginalestimate": 7200,
            "worklog": {
                "total": 2,
                "worklogs": [
                    {
                        "author": {"displayName": "Alice"},
                        "started": "2024-09-03T10:00:00.000+0000",
                        "timeSpentSeconds": 3600,
                    },
                    {"author": {"displayName": "Bob"}, "started": None, "timeSpentSeconds": 60},
                ],
            },
        },
        "changelog": {
            "histories": [
                {
                    "author": {"displayName": "Alice"},
                    "created": "2024-09-02T12:00:00.000-0400",
                    "items": [
                        {"field": "assignee", "fromString": None, "toString": "Alice"},
                        {"field": "status", "fromString": "To Do", "toString": "In Progress"},
                    ],
                },
                {"author": {"displayName": "Ghost"}, "created": "not-a-date", "items": []},
            ]
        },
    }


def test_parse_dt_handles_jira_offsets():
    parsed = parse_dt("2024-09-02T12:00:00.000-0400")
    assert parsed == datetime(2024, 9, 2, 16, 0, tzinfo=UTC)
    assert parse_dt(None) is None
    assert parse_dt("garbage") is None


def test_map_issue_fields():
    item = map_issue(_raw_issue())
    assert item.key == "ABC-1"
    assert item.status == "Done"
    assert item.assignee == "Alice"
    assert item.summary == "Build the thing"
    assert item.original_estimate == 7200


def test_map_issue_drops_undated_entries():
    item = map_issue(_raw_issue())
    assert len(item.worklogs) == 1
    assert item.worklogs[0].seconds == 3600
    assert item.worklogs[0].author == "Alice"
    assert len(item.history) == 1
    changes = item.history[0].changes
    assert [c.field for c in changes] == ["assignee", "status"]
    assert changes[1].from_value == "To Do"
    assert changes[1].to_value == "In Progress"


def test_estimate_falls_back_to_timetracking():
    raw = {"key": "ABC-2", "fields": {"timetracking": {"originalEstimateSeconds": 1800}}}
    assert map_issue(raw).original_estimate == 1800
    raw = {"key": "ABC-3", "fields": {"status": None}}
    item = map_issue(raw)
    assert item.original_estimate is None
    assert item.status is None
    assert item.assignee is None
    assert item.history == ()


def test_map_sprint_requires_dates():
    sprint = map_sprint(
        {
            "id": 12,
            "name": "Team Sprint 21",
            "state": "closed",
            "startDate": "2024-09-02T09:00:00.000Z",
            "endDate": "2024-09-16T09:00:00.000Z",
        }
    )
    assert sprint.id == 12
    assert sprint.start == datetime(2024, 9, 2, 9, 0, tzinfo=UTC)
    assert map_sprint({"id": 13, "name": "Future", "state": "future"}) is None


def test_map_board_and_missing_estimate():
    board = map_board({"id": 3, "name": "ABC board", "location": {"projectKey": "ABC"}})
    assert (board.id, board.name, board.project_key) == (3, "ABC board", "ABC")
    assert map_board({"id": 4, "name": "Loose"}).project_key is None
    missing = map_missing_estimate({"key": "ABC-5", "fields": {"assignee": None}})
    assert missing.key == "ABC-5"
    assert missing.assignee is None


def test_missing_key_maps_to_empty_string():
    assert map_issue({"fields": {"status": {"name": "To Do"}}}).key == ""
    assert map_missing_estimate({"fields": {}}).key == ""
