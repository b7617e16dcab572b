"""CallGraph Explorer custom exceptions."""


class ExplorerError(Exception):
    """Base exception for CallGraph Explorer errors."""

    status_code = 500


class ValidationError(ExplorerError):
    """A required parameter is missing or blank."""

    status_code = 400


class NotFoundError(ExplorerError):
    """Function, source file or directory not found in the store."""

    status_code = 404


class ServiceUnavailableError(ExplorerError):
    """The graph store is not configured or cannot be opened."""

    status_code = 503


class UnknownQueryError(ExplorerError):
    """A registry call used a name that is not registered in the store."""

    status_code = 500
