"""Jira API client wrapper (agile board/sprint pagination + enhanced search)."""

from __future__ import annotations

import hashlib
import json
import time
from typing import Any

from jira import JIRA, JIRAError

from .config import AGILE_PAGE_SIZE, DEFAULT_CACHE_TTL_SECONDS, SEARCH_PAGE_SIZE


class JiraAPI:
    def __init__(self, server: str, email: str, token: str):
        self.server = server.rstrip("/")
        self.client = JIRA(
            basic_auth=(email, token), options={"server": self.server, "rest_api_version": "3"}
        )
        # Simple in-memory cache: {(hash): (timestamp, data)}
        self._cache: dict[str, tuple[float, list]] = {}
        self._cache_ttl = DEFAULT_CACHE_TTL_SECONDS

    def clear_cache(self) -> None:
        """Reset the in-memory search cache."""
        cache = getattr(self, "_cache", None)
        if isinstance(cache, dict):
            cache.clear()

    def _session(self):
        session = getattr(self.client, "_session", None)
        if session is None:
            raise RuntimeError("JIRA session unavailable")
        return session

    def _cache_key(self, **payload) -> str:
        return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()

    def _cached(self, key: str) -> list | None:
        cached = self._cache.get(key)
        if cached and (time.time() - cached[0]) < self._cache_ttl:
            return cached[1]
        return None

    def _paginate_values(self, url: str, label: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Collect every ``values`` entry of an offset-paginated endpoint."""
        session = self._session()
        out: list[dict[str, Any]] = []
        start_at = 0
        while True:
            qp = dict(params or {})
            qp.update({"startAt": start_at, "maxResults": AGILE_PAGE_SIZE})
            resp = session.get(url, params=qp)
            if resp.status_code >= 400:
                raise RuntimeError(f"{label} failed {resp.status_code}: {resp.text[:200]}")
            data = resp.json()
            values = data.get("values", [])
            out.extend(values)
            if data.get("isLast", True) or not values:
                break
            start_at += len(values)
        return out

    def _agile_paginate(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        url = f"{self.server}/rest/agile/1.0/{path.lstrip('/')}"
        return self._paginate_values(url, f"Agile request {path}", params)

    def fetch_boards(self, project_key: str | None = None) -> list[dict[str, Any]]:
        params = {"projectKeyOrId": project_key} if project_key else None
        return self._agile_paginate("board", params)

    def fetch_sprints(self, board_id: int) -> list[dict[str, Any]]:
        return self._agile_paginate(f"board/{board_id}/sprint")

    def search_enhanced(
        self,
        jql: str,
        fields: list[str] | None = None,
        expand: list[str] | None = None,
        page_size: int = SEARCH_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        session = self._session()
        url = f"{self.server}/rest/api/3/search/jql"
        key = self._cache_key(jql=jql, fields=fields, expand=expand, page_size=page_size)
        cached = self._cached(key)
        if cached is not None:
            return cached
        params = {"jql": jql, "maxResults": page_size}
        if fields:
            params["fields"] = ",".join(fields)
        if expand:
            params["expand"] = ",".join(expand)
        out: list[dict[str, Any]] = []
        token = None
        while True:
            qp = dict(params)
            if token:
                qp["nextPageToken"] = token
            resp = session.get(url, params=qp)
            if resp.status_code >= 400:
                raise RuntimeError(f"Enhanced search failed {resp.status_code}: {resp.text[:200]}")
            data = resp.json()
            out.extend(data.get("issues", []))
            token = data.get("nextPageToken")
            if not token or data.get("isLast") is True:
                break
        self._cache[key] = (time.time(), out)
        return out

    def count_issues(self, jql: str) -> int:
        return len(self.search_enhanced(jql, fields=["key"]))

    def fetch_worklogs_raw(self, issue_key: str) -> list[dict[str, Any]]:
        try:
            worklogs = self.client.worklogs(issue_key)
        except JIRAError as exc:  # pragma: no cover - network error path
            raise RuntimeError(f"Failed to fetch worklogs for {issue_key}: {exc}") from exc
        return [w.raw if hasattr(w, "raw") else w for w in worklogs]

    def fetch_changelog_raw(self, issue_key: str) -> list[dict[str, Any]]:
        """Full change history of one issue, oldest page first."""
        url = f"{self.server}/rest/api/3/issue/{issue_key}/changelog"
        return self._paginate_values(url, f"Changelog request for {issue_key}")
