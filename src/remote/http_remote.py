"""
HTTP remote - talks to the hiring backend's company REST API
"""

from typing import Any, Callable, Optional, TypeVar

import httpx
from pydantic import ValidationError

from src.core.application import Application
from src.core.interview import Interview
from src.remote.base_remote import BaseRemote, RemoteError, ScheduleReceipt, ScheduleRequest
from src.remote.payloads import error_message, parse_application, parse_interview
from src.utils.config import get_settings
from src.utils.logger import logger

T = TypeVar("T")


class HttpRemote(BaseRemote):
    """
    Company-side endpoints of the hiring backend.

    Usage:
        async with HttpRemote() as remote:
            apps = await remote.list_applications()
    """

    SERVICE_NAME = "hireflow-api"

    def __init__(
        self,
        base_url: str = None,
        token: str = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.token = token if token is not None else settings.api_token

        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=settings.remote.timeout,
            verify=settings.remote.verify_tls,
        )

    async def __aenter__(self) -> "HttpRemote":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RemoteError(str(e)) from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = error_message(body)
            logger.error(f"{method} {path} -> {response.status_code} {message}")
            raise RemoteError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    def _parse_records(self, data: Any, parse: Callable[[dict], T], path: str) -> list[T]:
        """Parse a list payload; malformed records are skipped and logged"""
        if data is None:
            return []
        if not isinstance(data, list):
            raise RemoteError(f"Expected a list from {path}")

        records = []
        for item in data:
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object record from {path}: {item!r}")
                continue
            try:
                records.append(parse(item))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed record {item.get('_id') or item.get('id')} from {path}: "
                    f"{e.error_count()} validation error(s)"
                )
        return records

    async def list_applications(self, job_id: Optional[str] = None) -> list[Application]:
        path = f"/company/applications/{job_id}" if job_id else "/company/applications/all"
        return self._parse_records(await self._request("GET", path), parse_application, path)

    async def list_interviews(self, job_id: str) -> list[Interview]:
        path = f"/company/interviews/job/{job_id}"
        return self._parse_records(await self._request("GET", path), parse_interview, path)

    async def set_application_status(self, application_id: str, status: str) -> None:
        await self._request(
            "PUT",
            f"/company/applications/{application_id}/status",
            json={"status": status},
        )

    async def schedule_interview(self, request: ScheduleRequest) -> ScheduleReceipt:
        payload = {
            "jobId": request.job_id,
            "userId": request.applicant_id,
            "applicationId": request.application_id,
            "date": request.date.isoformat(),
            "notes": request.notes or "",
            "companyId": request.company_id,
            "createSharedLink": request.request_shared_link,
        }
        data = await self._request("POST", "/company/interviews", json=payload) or {}
        interview = data.get("interview") if isinstance(data.get("interview"), dict) else {}
        return ScheduleReceipt(
            shared_link=data.get("sharedLink"),
            location=data.get("location"),
            is_reschedule=bool(data.get("isReschedule")),
            interview_id=interview.get("_id") or data.get("_id"),
        )

    async def cancel_interview(self, interview_id: str) -> None:
        await self._request("DELETE", f"/company/interviews/{interview_id}")
