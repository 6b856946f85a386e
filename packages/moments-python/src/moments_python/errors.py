"""Error taxonomy shared by the incremental, batch and cached-vector paths.

Every statistic either returns a float or raises one of the three
``StatsError`` subclasses below. No statistic silently becomes NaN or zero.

    InvalidDataError    - an observation is NaN or +/-Infinity
    NotEnoughDataError  - too few observations for the requested statistic
    UndefinedError      - enough observations, but no finite value exists
                          (zero variance, underflowing spread, overflow)
"""

from __future__ import annotations


class StatsError(ValueError):
    """Base class for all descriptive-statistics errors.

    Attributes:
        kind: Stable identifier of the error kind, used in reports.
    """

    kind = "stats_error"


class InvalidDataError(StatsError):
    """Raised when an observation is NaN or infinite.

    Attributes:
        value: The offending value
        index: Position of the value in the input sequence, if known
    """

    kind = "invalid_data"

    def __init__(
        self,
        value: float,
        index: int | None = None,
        message: str | None = None,
    ) -> None:
        self.value = value
        self.index = index

        if message is None:
            where = f" at index {index}" if index is not None else ""
            message = f"data contains NaNs or Infs: {value!r}{where}"
        super().__init__(message)


class NotEnoughDataError(StatsError):
    """Raised when the observation count is below a statistic's minimum.

    Attributes:
        statistic: Name of the requested statistic
        count: Number of observations available
        required: Minimum number of observations for the statistic
    """

    kind = "not_enough_data"

    def __init__(
        self,
        statistic: str,
        count: int,
        required: int,
        message: str | None = None,
    ) -> None:
        self.statistic = statistic
        self.count = count
        self.required = required

        if message is None:
            message = (
                f"not enough data for {statistic}: "
                f"count={count}, required={required}"
            )
        super().__init__(message)


class UndefinedError(StatsError):
    """Raised when a statistic has no finite value for the data.

    Either the variance is exactly zero, the spread is too small for the
    divisor of a standardized moment to be represented, or an intermediate
    sum overflowed to infinity.

    Attributes:
        statistic: Name of the requested statistic
        reason: "zero variance", "variance underflow" or "overflow"
    """

    kind = "undefined"

    def __init__(
        self,
        statistic: str,
        reason: str = "zero variance",
        message: str | None = None,
    ) -> None:
        self.statistic = statistic
        self.reason = reason

        if message is None:
            message = f"data produces undefined values for {statistic} ({reason})"
        super().__init__(message)
