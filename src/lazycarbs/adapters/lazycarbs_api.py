"""LazyCarbs backend API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class LazyCarbsApi(Protocol):
    """Interface for LazyCarbs backend interactions."""

    async def get_calorie_factors(self) -> dict[str, object]:
        """Fetch the stored global calorie factors."""

    async def put_calorie_factors(
        self, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object] | None:
        """Replace the stored global calorie factors."""

    async def get_hourly_factors(self) -> list[dict[str, object]]:
        """Fetch the bolus factors for every hour."""

    async def put_hourly_factor(
        self, hour: int, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object] | None:
        """Update the bolus factor of one hour."""

    async def calculate(
        self, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object]:
        """Run a bolus calculation and return the raw result."""


@dataclass
class HttpxLazyCarbsApi(LazyCarbsApi):
    """HTTPX-backed LazyCarbs API client.

    Non-success responses surface as ``httpx.HTTPStatusError`` so callers can
    inspect the status code and body.
    """

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 10.0) -> "HttpxLazyCarbsApi":
        """Create an API client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def get_calorie_factors(self) -> dict[str, object]:
        """Fetch the stored global calorie factors."""
        response = await self.http_client.get(
            f"{self.base_url}/api/calorie-factors", timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def put_calorie_factors(
        self, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object] | None:
        """Replace the stored global calorie factors."""
        response = await self.http_client.put(
            f"{self.base_url}/api/calorie-factors",
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return _json_or_none(response)

    async def get_hourly_factors(self) -> list[dict[str, object]]:
        """Fetch the bolus factors for every hour."""
        response = await self.http_client.get(
            f"{self.base_url}/api/bolus-factors", timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def put_hourly_factor(
        self, hour: int, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object] | None:
        """Update the bolus factor of one hour."""
        response = await self.http_client.put(
            f"{self.base_url}/api/bolus-factors/{hour}",
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return _json_or_none(response)

    async def calculate(
        self, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object]:
        """Run a bolus calculation."""
        response = await self.http_client.post(
            f"{self.base_url}/api/calculate",
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _json_or_none(response: httpx.Response) -> dict[str, object] | None:
    """Decode a JSON object body; plain-text acknowledgements yield None."""
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
