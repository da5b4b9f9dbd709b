"""Error hierarchy for the lesson-log engine.

Transient failures (worth retrying) are separated from permanent ones so the
tenacity decorators in the blob store can classify them automatically.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    def write(self, name: str, payload: list) -> None:
        ...
"""


class LessonLogError(Exception):
    """Base exception for all lesson-log errors."""

    pass


class TransientError(LessonLogError):
    """Temporary failure that may succeed on retry.

    Examples: file locked by another process, interrupted atomic replace.
    """

    pass


class StoreWriteError(TransientError):
    """A data-set blob could not be written to disk."""

    pass


class PermanentError(LessonLogError):
    """Failure that won't succeed on retry.

    Examples: corrupt JSON blob, import file with an unusable layout.
    """

    pass


class CorruptBlobError(PermanentError):
    """A persisted data set is not valid JSON or does not match its schema.

    Needs a human to repair or delete the file, cannot be fixed by retry.
    """

    pass


class ImportFormatError(PermanentError):
    """Catalog or timetable input was rejected before reaching the engine."""

    pass
