from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

import httpx

from cityscope.errors import (
    MalformedPayload,
    MissingParameter,
    TransportError,
    UpstreamError,
    UpstreamRejected,
)

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T
    ok: bool = True


@dataclass(frozen=True)
class Failure:
    error: UpstreamError | MissingParameter
    ok: bool = False

    @property
    def reason(self) -> str:
        return str(self.error)

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.error, "status_code", None)


UpstreamResult = Union[Success[T], Failure]


class UpstreamClient(ABC, Generic[T]):
    """
    One HTTP GET against a fixed base URL, folded into Success/Failure.

    Subclasses implement `parse(body)`; anything it raises on an unexpected
    shape (KeyError, IndexError, TypeError, ValueError, AttributeError) becomes a
    MalformedPayload failure. No retries: one call, one request.
    """

    name = "upstream"

    def __init__(self, http: httpx.AsyncClient, base_url: str, timeout: float = 10.0) -> None:
        self.http = http
        self.base_url = base_url
        self.timeout = timeout
        self._log = logging.getLogger(f"cityscope.upstream.{self.name}")

    @abstractmethod
    def parse(self, body: Any) -> T:
        """Turn a decoded 2xx JSON body into the typed reading."""

    async def _get(self, params: dict, headers: Optional[dict] = None) -> UpstreamResult[T]:
        try:
            response = await self.http.get(
                self.base_url, params=params, headers=headers, timeout=self.timeout
            )
        except httpx.TimeoutException as exc:
            self._log.warning("%s request timed out: %s", self.name, exc)
            return Failure(TransportError("timeout", str(exc) or None))
        except httpx.RequestError as exc:
            self._log.warning("%s request failed: %s", self.name, exc)
            return Failure(TransportError("transport", str(exc) or None))
        except httpx.InvalidURL as exc:
            self._log.warning("%s has a bad URL: %s", self.name, exc)
            return Failure(TransportError("invalid_url", str(exc) or None))

        if not response.is_success:
            self._log.warning("%s returned %s", self.name, response.status_code)
            return Failure(UpstreamRejected(response.status_code))

        try:
            return Success(self.parse(response.json()))
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            # ValueError covers a non-JSON body; AttributeError a null where an object belongs
            self._log.warning("%s sent an unexpected payload: %r", self.name, exc)
            return Failure(MalformedPayload(f"{self.name}: {exc!r}"))


def _opt_float(v) -> Optional[float]:
    return None if v is None else float(v)
