"""Domain layer: failure taxonomy surfaced to the HTTP boundary."""


class TeamHubError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(TeamHubError):
    """Malformed or incomplete request (e.g. no task title, no target status)."""

    status_code = 400


class UnauthorizedError(TeamHubError):
    status_code = 401


class ForbiddenError(TeamHubError):
    """Rejected by the authorization gate."""

    status_code = 403


class NotFoundError(TeamHubError):
    """A task, user, team or project reference did not resolve."""

    status_code = 404
