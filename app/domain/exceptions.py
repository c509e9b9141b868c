from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class MissingPairError(DomainError):
    """A pair address is required to compute price history."""


class InvalidPeriodError(DomainError):
    """Period token is not one of the supported lookback windows."""


class PriceHistoryInputError(DomainError):
    """Invalid parameters for the price history computation."""
