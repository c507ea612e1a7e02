class StoreError(Exception):
    """Base class for storage-layer failures."""


class InvalidRecordError(StoreError):
    """
    Writer input failed validation before reaching the database.

    Raised by parse_batch; record models built directly raise pydantic's
    ValidationError instead.
    """


class BatchCommitError(StoreError):
    """A version range could not be committed, even after cleaning its rows."""

    def __init__(self, start_version: int, end_version: int, cause: BaseException):
        self.start_version = start_version
        self.end_version = end_version
        self.cause = cause
        super().__init__(
            f"versions [{start_version}, {end_version}] failed to commit: {cause}"
        )
