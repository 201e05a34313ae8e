"""Applying one bolus factor across a range of hours."""

import logging
from dataclasses import dataclass

from lazycarbs.domain.errors import (
    InvalidRange,
    LazyCarbsError,
    NoCredential,
    RangeApplyFailed,
)
from lazycarbs.domain.models import (
    FIRST_HOUR,
    LAST_HOUR,
    RangeApplyResult,
    RangeRequest,
)
from lazycarbs.services.hourly_factors import HourlyFactorEditor
from lazycarbs.services.remote import is_positive_number

_logger = logging.getLogger(__name__)


def validate_range(request: RangeRequest) -> None:
    """Raise InvalidRange unless the request covers valid hours and value."""
    if not isinstance(request.from_hour, int) or not isinstance(request.to_hour, int):
        raise InvalidRange("Range hours must be whole numbers")
    if not FIRST_HOUR <= request.from_hour <= request.to_hour <= LAST_HOUR:
        raise InvalidRange(
            f"Hours must satisfy {FIRST_HOUR} <= from <= to <= {LAST_HOUR}, "
            f"got {request.from_hour}..{request.to_hour}"
        )
    if not is_positive_number(request.value):
        raise InvalidRange(
            f"Range value must be a positive number, got {request.value}"
        )


@dataclass
class RangeApplier:
    """Writes a range as sequential single-hour saves.

    The backend only updates one hour per call, so hours are committed in
    ascending order and the first failure ends the run. Hours before the
    failing one keep the new value.
    """

    editor: HourlyFactorEditor

    async def apply(self, request: RangeRequest) -> RangeApplyResult:
        """Apply ``request.value`` to every hour in the closed range."""
        validate_range(request)
        gate = self.editor.gate
        if not gate.is_valid():
            gate.request_prompt()
            raise NoCredential("A valid API key is required to save bolus factors")

        committed: list[int] = []
        for hour in request.hours:
            try:
                await self.editor.commit(hour, request.value)
            except LazyCarbsError as exc:
                _logger.warning(
                    "Range apply %s..%s stopped at hour %s after %s saved",
                    request.from_hour,
                    request.to_hour,
                    hour,
                    len(committed),
                )
                raise RangeApplyFailed(hour, committed, exc) from exc
            committed.append(hour)

        _logger.info(
            "Applied bolus factor %.2f to hours %s..%s",
            request.value,
            request.from_hour,
            request.to_hour,
        )
        return RangeApplyResult(request=request, committed_hours=committed)
