"""Dependency container wiring for the client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from lazycarbs.adapters.credential_store import CredentialStore, FileCredentialStore
from lazycarbs.adapters.lazycarbs_api import HttpxLazyCarbsApi, LazyCarbsApi
from lazycarbs.app_logging import configure_logging
from lazycarbs.config import Settings, normalize_base_url
from lazycarbs.services.calculation import CalculationPipeline
from lazycarbs.services.calorie_factors import CalorieFactorEditor
from lazycarbs.services.credentials import CredentialGate
from lazycarbs.services.hourly_factors import HourlyFactorEditor
from lazycarbs.services.range_apply import RangeApplier


@dataclass
class AppContainer:
    """Holds session-wide dependencies."""

    settings: Settings
    api: LazyCarbsApi
    credential_store: CredentialStore
    credential_gate: CredentialGate
    hourly_factor_editor: HourlyFactorEditor
    range_applier: RangeApplier
    calorie_factor_editor: CalorieFactorEditor
    calculation_pipeline: CalculationPipeline
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None,
    on_credential_prompt: Callable[[], None] | None = None,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging()
    api = HttpxLazyCarbsApi.create(
        base_url=normalize_base_url(resolved_settings.api_base_url),
        timeout=resolved_settings.request_timeout_seconds,
    )
    credential_store = FileCredentialStore(resolved_settings.credential_path)
    gate = CredentialGate.from_store(
        credential_store,
        header_name=resolved_settings.api_key_header,
        on_prompt=on_credential_prompt,
    )
    hourly_factor_editor = HourlyFactorEditor(api=api, gate=gate)

    async def close_resources() -> None:
        await api.close()

    return AppContainer(
        settings=resolved_settings,
        api=api,
        credential_store=credential_store,
        credential_gate=gate,
        hourly_factor_editor=hourly_factor_editor,
        range_applier=RangeApplier(hourly_factor_editor),
        calorie_factor_editor=CalorieFactorEditor(api=api, gate=gate),
        calculation_pipeline=CalculationPipeline(api=api, gate=gate),
        close_resources=close_resources,
    )
