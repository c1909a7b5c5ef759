"""Error types raised by the URL shortener."""


class ShortenerError(Exception):
    """Base class for URL shortener errors.

    Each error carries the HTTP status code the web layer answers with.
    """

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidUrlError(ShortenerError):
    """The provided value is not a well-formed absolute URI."""

    status_code = 400


class MissingParameterError(ShortenerError):
    """A required request parameter was not provided."""

    status_code = 400

    def __init__(self, *names: str):
        super().__init__(f"Bad Request. Missing {', '.join(names)} in body parameter")
        self.names = names


class NotFoundError(ShortenerError):
    """The hash does not exist or has been removed."""

    status_code = 404

    def __init__(self, message: str = "Not Found. Provided hash does not exists"):
        super().__init__(message)


class AuthorizationError(ShortenerError):
    """The remove token does not match the record."""

    status_code = 400

    def __init__(self, message: str = "Bad Request. token is invalid"):
        super().__init__(message)


class PersistenceError(ShortenerError):
    """The record store failed for a reason other than a hash conflict."""

    status_code = 500


class HashCollisionError(PersistenceError):
    """The hash is already held by a record for a different URL."""
