from __future__ import annotations

from typing import Protocol

import httpx

from app.config import Settings
from app.core.exceptions import SessionCheckFailure, SignOutFailure
from app.core.logging import get_logger
from app.utils.retry import with_retry

logger = get_logger(__name__)


class AuthCollaborator(Protocol):
    async def get_session_exists(self) -> bool: ...

    async def sign_out(self) -> None: ...


class SupabaseAuthClient:
    """Reads session existence from, and revokes sessions in, Supabase GoTrue."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        access_token: str | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._access_token = access_token

    async def get_session_exists(self) -> bool:
        """True when the access token still maps to a live user session.

        Raises SessionCheckFailure when the backend can't be asked; callers must
        not read that as "logged out".
        """
        if not self._access_token:
            return False

        try:
            resp = await self._request("GET", "/auth/v1/user")
        except httpx.HTTPError as exc:
            raise SessionCheckFailure(
                message="Session check request failed",
                detail=f"{type(exc).__name__}: {exc}",
            ) from exc

        if resp.status_code == 200:
            return True
        if resp.status_code in (401, 403):
            logger.info("session_absent", status=resp.status_code)
            return False
        raise SessionCheckFailure(
            message="Unexpected session check response",
            detail=f"status={resp.status_code}",
        )

    async def sign_out(self) -> None:
        if not self._access_token:
            return

        try:
            resp = await self._request("POST", "/auth/v1/logout", params={"scope": "local"})
        except httpx.HTTPError as exc:
            raise SignOutFailure(
                message="Sign-out request failed",
                detail=f"{type(exc).__name__}: {exc}",
            ) from exc

        # 401/404: token already invalid, nothing left to revoke
        if resp.is_success or resp.status_code in (401, 404):
            self._access_token = None
            logger.info("sign_out_complete", status=resp.status_code)
            return
        raise SignOutFailure(
            message="Sign-out rejected by auth backend",
            detail=f"status={resp.status_code}, body={resp.text.strip()[:100]}",
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self._settings.SUPABASE_URL.rstrip('/')}{path}"
        headers = {"Authorization": f"Bearer {self._access_token}"}

        @with_retry(
            max_retries=self._settings.MAX_RETRIES,
            backoff_factor=self._settings.BACKOFF_FACTOR,
        )
        async def send() -> httpx.Response:
            return await self._client.request(method, url, headers=headers, **kwargs)

        return await send()
