"""Shared test fixtures."""

from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest

from lazycarbs.adapters.credential_store import CredentialStore
from lazycarbs.adapters.lazycarbs_api import LazyCarbsApi
from lazycarbs.config import Settings
from lazycarbs.services.calculation import CalculationPipeline
from lazycarbs.services.calorie_factors import CalorieFactorEditor
from lazycarbs.services.credentials import CredentialGate
from lazycarbs.services.hourly_factors import HourlyFactorEditor
from lazycarbs.services.range_apply import RangeApplier

API_KEY_HEADER = "X-API-Key"


def http_error(
    status_code: int, text: str = "", json: dict[str, object] | None = None
) -> httpx.HTTPStatusError:
    """Build the error httpx raises from ``raise_for_status``."""
    request = httpx.Request("PUT", "https://lazycarbs.test/api")
    if json is not None:
        response = httpx.Response(status_code, json=json, request=request)
    else:
        response = httpx.Response(status_code, text=text, request=request)
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )


@dataclass
class InMemoryCredentialStore(CredentialStore):
    """In-memory credential store that counts operations."""

    value: str | None = None
    loads: int = 0
    stores: list[str] = field(default_factory=list)
    clears: int = 0

    def load(self) -> str | None:
        self.loads += 1
        return self.value

    def store(self, api_key: str) -> None:
        self.stores.append(api_key)
        self.value = api_key

    def clear(self) -> None:
        self.clears += 1
        self.value = None


@dataclass
class FakeLazyCarbsApi(LazyCarbsApi):
    """Fake backend keeping factors in memory and recording every call."""

    hourly: dict[int, float] = field(
        default_factory=lambda: {hour: 1.0 for hour in range(24)}
    )
    calorie_factors: dict[str, object] | None = field(
        default_factory=lambda: {
            "usualBeCalories": 110.0,
            "insulinTypeCalorieCovering": 150.0,
        }
    )
    calorie_error: Exception | None = None
    calorie_save_error: Exception | None = None
    hourly_error: Exception | None = None
    hourly_failures: dict[int, Exception] = field(default_factory=dict)
    calculate_error: Exception | None = None
    calculate_result: dict[str, object] = field(
        default_factory=lambda: {
            "statusMessage": "Berechnung erfolgreich",
            "dbStatus": "Nicht gespeichert",
            "selectedMethodName": "Kalorischer Überschuss",
            "finalCorrectBolus": 4.25,
        }
    )
    calls: list[tuple[str, object, dict[str, str]]] = field(default_factory=list)

    async def get_calorie_factors(self) -> dict[str, object]:
        self.calls.append(("get_calorie_factors", None, {}))
        if self.calorie_error is not None:
            raise self.calorie_error
        if self.calorie_factors is None:
            raise http_error(404)
        return dict(self.calorie_factors)

    async def put_calorie_factors(
        self, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object] | None:
        self.calls.append(("put_calorie_factors", payload, headers))
        if self.calorie_save_error is not None:
            raise self.calorie_save_error
        self.calorie_factors = dict(payload)
        return None

    async def get_hourly_factors(self) -> list[dict[str, object]]:
        self.calls.append(("get_hourly_factors", None, {}))
        if self.hourly_error is not None:
            raise self.hourly_error
        return [
            {"hour": hour, "bolusFactor": value}
            for hour, value in reversed(list(self.hourly.items()))
        ]

    async def put_hourly_factor(
        self, hour: int, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object] | None:
        self.calls.append(("put_hourly_factor", payload, headers))
        if hour in self.hourly_failures:
            raise self.hourly_failures[hour]
        self.hourly[hour] = float(payload["bolusFactor"])
        return dict(payload)

    async def calculate(
        self, payload: dict[str, object], headers: dict[str, str]
    ) -> dict[str, object]:
        self.calls.append(("calculate", payload, headers))
        if self.calculate_error is not None:
            raise self.calculate_error
        return dict(self.calculate_result)

    def calls_named(self, name: str) -> list[tuple[str, object, dict[str, str]]]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_base_url="https://lazycarbs.test/",
        credential_path=tmp_path / "api_key",
    )


@pytest.fixture
def api() -> FakeLazyCarbsApi:
    return FakeLazyCarbsApi()


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore(value="secret-key")


@pytest.fixture
def gate(credential_store: InMemoryCredentialStore) -> CredentialGate:
    return CredentialGate.from_store(credential_store, header_name=API_KEY_HEADER)


@pytest.fixture
def hourly_editor(api: FakeLazyCarbsApi, gate: CredentialGate) -> HourlyFactorEditor:
    return HourlyFactorEditor(api=api, gate=gate)


@pytest.fixture
def range_applier(hourly_editor: HourlyFactorEditor) -> RangeApplier:
    return RangeApplier(hourly_editor)


@pytest.fixture
def calorie_editor(api: FakeLazyCarbsApi, gate: CredentialGate) -> CalorieFactorEditor:
    return CalorieFactorEditor(api=api, gate=gate)


@pytest.fixture
def pipeline(api: FakeLazyCarbsApi, gate: CredentialGate) -> CalculationPipeline:
    return CalculationPipeline(api=api, gate=gate)
