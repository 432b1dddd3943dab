"""
Bug Store Client
================
Async HTTP client for the bug store that owns all durable state.

The store is the authority for idempotence: applying the same BugUpdate
twice is its problem, not ours. This client never retries.

Endpoints (all POST, JSON):
    /api/reporting_poll       {"type"}                → {"reports": [BugReport]}
    /api/poll_completed_jobs  {"type"}                → {"reports": [BugReport]}
    /api/update_bug           BugUpdate               → {"ok", "reason"}
    /api/job_reported         {"job_id"}              → {}
    /api/test_request         {bug_id, user, ...}     → {"reply"}
"""
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from bugmail.core.exceptions import StoreError
from bugmail.models.bug_report import BugReport
from bugmail.models.bug_update import BugUpdate, CommandResult

logger = logging.getLogger(__name__)

_T = TypeVar("_T", bound=BaseModel)


class _PollResponse(BaseModel):
    reports: List[BugReport] = []


class _TestResponse(BaseModel):
    reply: str = ""


class _Empty(BaseModel):
    pass


class DashboardStore:

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"User-Agent": "bugmail"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.client = httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _call(self, method: str, payload: Dict[str, Any], result: Type[_T]) -> _T:
        logger.debug("store call %s", method)
        try:
            response = await self.client.post(f"/api/{method}", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"{method} failed: HTTP {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise StoreError(f"{method} failed: {e}") from e
        try:
            return result.model_validate_json(response.content or b"{}")
        except ValidationError as e:
            raise StoreError(f"{method} returned a malformed response: {e}") from e

    async def reporting_poll(self, channel: str) -> List[BugReport]:
        """Bugs newly eligible for reporting on ``channel``."""
        resp = await self._call("reporting_poll", {"type": channel}, _PollResponse)
        return resp.reports

    async def poll_completed_jobs(self, channel: str) -> List[BugReport]:
        """Finished test jobs waiting to be reported on ``channel``."""
        resp = await self._call("poll_completed_jobs", {"type": channel}, _PollResponse)
        return resp.reports

    async def update_bug(self, cmd: BugUpdate) -> CommandResult:
        return await self._call("update_bug", cmd.model_dump(mode="json"), CommandResult)

    async def job_reported(self, job_id: str) -> None:
        await self._call("job_reported", {"job_id": job_id}, _Empty)

    async def test_request(
        self, bug_id: str, user: str, ext_id: str, patch: str, repo: str, branch: str
    ) -> str:
        """Ask the store to schedule a patch test. Returns reply text for the user, if any."""
        resp = await self._call("test_request", {
            "bug_id": bug_id,
            "user": user,
            "ext_id": ext_id,
            "patch": patch,
            "repo": repo,
            "branch": branch,
        }, _TestResponse)
        return resp.reply
