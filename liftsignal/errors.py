"""Failure kinds surfaced at the signal engine boundary."""


class UpstreamFailure(Exception):
    """The observation fetch itself failed (connectivity, query error, bad rows).

    The message is passed to the caller verbatim.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoDataError(LookupError):
    """The fetch succeeded but no observations exist for the exercise key."""

    def __init__(self, exercise_key: str | None = None):
        super().__init__(exercise_key)
        self.exercise_key = exercise_key
