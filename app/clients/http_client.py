from __future__ import annotations

import httpx

from app.config import Settings


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    transport = httpx.AsyncHTTPTransport(
        retries=settings.MAX_RETRIES,
        verify=settings.VERIFY_SSL,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(settings.REQUEST_TIMEOUT),
        headers={
            "apikey": settings.SUPABASE_ANON_KEY.get_secret_value(),
            "Content-Type": "application/json",
        },
    )


async def close_http_client(client: httpx.AsyncClient) -> None:
    await client.aclose()
