# app/services/source_result.py
"""
Explicit results for report sub-fetches.

A report is assembled from many independent reads. A read that fails is
captured as a SourceUnavailable error instead of aborting the report, and
the caller decides which default stands in for the missing field.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SourceUnavailable(Exception):
    """A sub-fetch (hour logs, assignments, memberships, ...) could not be read."""

    def __init__(self, source: str, cause: Optional[BaseException] = None):
        self.source = source
        self.cause = cause
        message = f"Source unavailable: {source}"
        if cause is not None:
            message += f" ({type(cause).__name__}: {cause})"
        super().__init__(message)


@dataclass(frozen=True)
class SourceResult(Generic[T]):
    """Outcome of one sub-fetch: a value, or the error that replaced it."""
    source: str
    value: Optional[T] = None
    error: Optional[SourceUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        return default if self.error is not None else self.value

    @classmethod
    def success(cls, source: str, value: T) -> "SourceResult[T]":
        return cls(source=source, value=value)

    @classmethod
    def failure(cls, source: str, cause: Optional[BaseException] = None) -> "SourceResult[T]":
        if isinstance(cause, SourceUnavailable) and cause.source == source:
            error = cause
        else:
            error = SourceUnavailable(source, cause)
        logger.warning(f"{error}")
        return cls(source=source, error=error)


def fetch_source(source: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> SourceResult[T]:
    """Run one read and capture any failure as SourceUnavailable."""
    try:
        return SourceResult.success(source, fn(*args, **kwargs))
    except Exception as e:
        return SourceResult.failure(source, e)


def fetch_with_fallback(
    source: str,
    attempts: Sequence[Tuple[str, Callable[[], T]]],
    accept: Optional[Callable[[T], bool]] = None,
) -> SourceResult[T]:
    """
    Try an ordered list of reads until one yields an acceptable value.

    Args:
        source: Label for the combined read
        attempts: (label, read) pairs, tried in order
        accept: Predicate a value must satisfy to stop the search; a rejected
            value is kept in case no later attempt does better

    Returns:
        The first accepted result, else the last successful one, else a failure
    """
    fallback: Optional[SourceResult[T]] = None
    last_error: Optional[BaseException] = None

    for label, read in attempts:
        result = fetch_source(f"{source}:{label}", read)
        if not result.ok:
            last_error = result.error
            continue
        if accept is None or accept(result.value):
            return SourceResult.success(source, result.value)
        logger.info(f"{source}: '{label}' returned no usable rows, trying next fallback")
        fallback = SourceResult.success(source, result.value)

    if fallback is not None:
        return fallback
    return SourceResult.failure(source, last_error)
