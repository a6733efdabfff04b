"""Error taxonomy shared by the parser, the session engine and the loaders."""


class QuizError(Exception):
    """Base class for recoverable quiz errors."""


class SourceUnavailable(QuizError):
    """The question source could not be fetched."""


class EmptyQuestionSet(QuizError):
    """A session cannot start without questions."""


class EmptyParseResult(EmptyQuestionSet):
    """The source was read but no valid question could be parsed."""


class EmptyFilterResult(EmptyQuestionSet):
    """The section/mistake filter left no questions."""


class MalformedRecord(QuizError, ValueError):
    """A structured question record is missing a field or has a bad value."""

    def __init__(self, position: int, detail: str):
        self.position = position
        self.detail = detail
        super().__init__(f"Record {position}: {detail}")


class InvalidTransition(QuizError):
    """An event was dispatched while its precondition does not hold."""
