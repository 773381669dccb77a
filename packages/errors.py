class TrainingLogError(Exception):
    """Base class for failures surfaced to callers of the training-log pipeline."""


class StructuralParseError(TrainingLogError):
    """The uploaded content is not well-formed delimited text.

    Raised once per upload; no partial result accompanies it.
    """

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line


class UpstreamGenerationError(TrainingLogError):
    """The completion service failed or returned nothing usable."""

    default_user_message = (
        "Failed to generate training plan. Please check the language-model "
        "configuration and try again."
    )

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or self.default_user_message
