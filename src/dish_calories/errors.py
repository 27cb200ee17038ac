"""Error taxonomy for calorie resolution."""

from enum import Enum

NOT_FOUND_MESSAGE = "Sorry, we could not find that dish in our database"


class CalorieServiceError(Exception):
    """Base class for failures surfaced by the calorie services."""

    @property
    def user_message(self) -> str:
        """Return the message shown to API callers."""
        return str(self)


class ValidationError(CalorieServiceError):
    """Malformed input: bad dish name, servings out of range, bad batch size."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class InvalidInputError(CalorieServiceError):
    """A provider was asked to compute calories from unusable input."""


class NotFoundError(CalorieServiceError):
    """No candidate with usable calorie data exists for a query."""

    def __init__(self, query: str, detail: str = "Dish not found") -> None:
        self.query = query
        self.detail = detail
        super().__init__(f"{detail}: {query}")

    @property
    def user_message(self) -> str:
        return NOT_FOUND_MESSAGE


class ProviderErrorKind(str, Enum):
    """Upstream failure categories derived from HTTP status codes."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"

    @classmethod
    def from_status_code(cls, status_code: int | None) -> "ProviderErrorKind":
        """Map an upstream HTTP status to a failure kind."""
        if status_code is None:
            return cls.UNAVAILABLE
        if status_code == 401:
            return cls.UNAUTHORIZED
        if status_code == 403:
            return cls.FORBIDDEN
        if status_code == 429:
            return cls.RATE_LIMITED
        if status_code >= 500:
            return cls.UNAVAILABLE
        return cls.UNKNOWN


_PROVIDER_MESSAGES = {
    ProviderErrorKind.UNAUTHORIZED: "Food database service configuration error",
    ProviderErrorKind.FORBIDDEN: "Food database access denied",
    ProviderErrorKind.RATE_LIMITED: (
        "Service temporarily busy, please try again in a few minutes"
    ),
    ProviderErrorKind.UNAVAILABLE: "Food database service is temporarily unavailable",
    ProviderErrorKind.UNKNOWN: "Food database request failed",
}


class ProviderError(CalorieServiceError):
    """Upstream nutrition provider failure."""

    def __init__(
        self,
        kind: ProviderErrorKind,
        detail: str,
        status_code: int | None = None,
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{kind.value} (status={status_code}): {detail}")

    @property
    def user_message(self) -> str:
        return _PROVIDER_MESSAGES[self.kind]
