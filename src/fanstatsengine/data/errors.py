"""Data-layer exceptions for schedule fetches, season ids and the JSON store."""


class ScheduleFetchError(Exception):
    """Raised when a team's season schedule cannot be fetched or decoded."""

    def __init__(self, message: str, team: str | None = None, season: str | None = None) -> None:
        super().__init__(message)
        self.team = team
        self.season = season


class InvalidSeasonError(ValueError):
    """Raised when a season id is not of the form "YYYY-YYYY" with consecutive years."""

    def __init__(self, message: str, season: str | None = None) -> None:
        super().__init__(message)
        self.season = season


class StoreError(Exception):
    """Raised when the backing JSON file cannot be written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path or ""
