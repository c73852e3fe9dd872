"""Error taxonomy for the lookup / save / history paths.

Upstream errors never escape an UpstreamClient; they ride inside a Failure.
Everything else is raised and mapped to an HTTP status by the routers.
"""


class CityScopeError(Exception):
    """Base class for every domain error."""


# --- Upstream (captured into Failure, never raised by clients) ---

class UpstreamError(CityScopeError):
    """Something went wrong talking to a third-party provider."""


class TransportError(UpstreamError):
    """Network / DNS / timeout. `tag` is a short machine-readable label."""
    def __init__(self, tag: str, detail: str | None = None):
        self.tag = tag
        self.detail = detail
        super().__init__(f"{tag}: {detail}" if detail else tag)


class UpstreamRejected(UpstreamError):
    """Provider answered with a non-2xx status."""
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}")


class MalformedPayload(UpstreamError):
    """Provider answered 2xx but the body was not the shape we expect."""


# --- Caller / pipeline errors ---

class MissingParameter(CityScopeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing required parameter '{name}'")


class WeatherUnavailable(CityScopeError):
    """The mandatory weather lookup failed; no record can be built."""
    def __init__(self, error: UpstreamError | MissingParameter):
        self.error = error
        super().__init__(f"weather unavailable: {error}")

    @property
    def city_not_found(self) -> bool:
        return isinstance(self.error, UpstreamRejected) and self.error.status_code == 404


class Unauthenticated(CityScopeError):
    """No identity present where one is required."""


class Forbidden(CityScopeError):
    """Credential mismatch on the persistence path."""


class StorageFailure(CityScopeError):
    """The database rejected a write."""
