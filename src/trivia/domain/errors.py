class QuizError(Exception):
    """Base class for every failure the quiz surfaces to the player."""


class FetchError(QuizError):
    """The trivia service could not deliver categories or questions."""


class NetworkError(FetchError):
    """Transport failure: connection, timeout or non-2xx HTTP status."""


class ParseError(FetchError):
    """The response body is not the JSON shape the client expects."""


class SemanticFetchError(FetchError):
    """Transport succeeded but the service reported it could not fulfil the request."""

    def __init__(self, message: str, response_code: int | None = None) -> None:
        super().__init__(message)
        self.response_code = response_code


class StorageError(QuizError):
    """The high score slot could not be read or written."""
