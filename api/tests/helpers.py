from __future__ import annotations

import asyncio
from typing import Any

import httpx

import main


class FakeCompletionClient:
    """Stands in for CompletionClient; replays canned text and records calls."""

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        self.calls.append(
            {"messages": messages, "model": model, "response_format": response_format}
        )
        if self.error is not None:
            raise self.error
        return self.text


def request(method: str, url: str, **kwargs) -> httpx.Response:
    async def _request():
        transport = httpx.ASGITransport(app=main.app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            return await client.request(method, url, **kwargs)

    return asyncio.run(_request())
