from __future__ import annotations


class DashboardError(Exception):
    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.error)
        self.message = message

    def to_body(self) -> dict:
        body: dict = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body

    def headers(self) -> dict[str, str]:
        return {}


class NotFoundError(DashboardError):
    status_code = 404
    error = "Not found"


class BrandExistsError(DashboardError):
    status_code = 409
    error = "Brand already exists"


class StorageError(DashboardError):
    status_code = 500
    error = "Storage request failed"

    def to_body(self) -> dict:
        # Driver messages stay in the server log
        return {"error": self.error}


class UpstreamAuthError(DashboardError):
    status_code = 403
    error = "Authentication failed"


class UpstreamRateLimitError(DashboardError):
    status_code = 429
    error = "Rate limit exceeded"

    def __init__(self, message: str | None = None, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after

    def to_body(self) -> dict:
        body = super().to_body()
        body["retry_after"] = self.retry_after
        return body

    def headers(self) -> dict[str, str]:
        if self.retry_after is None:
            return {}
        return {"Retry-After": str(self.retry_after)}


class UpstreamUnavailableError(DashboardError):
    status_code = 500
    error = "Failed to create link"
