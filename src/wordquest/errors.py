class ExerciseError(Exception):
    """Base class for errors raised while building or grading exercises."""


class InsufficientDataError(ExerciseError):
    """The vocabulary pool cannot satisfy a generator's minimum input."""


class EmptyOptionsError(ExerciseError):
    """A choice question reached the presentation layer without options.

    Generators never produce such a question, so seeing this means the
    question was built or altered somewhere else.
    """


class SessionError(Exception):
    """Base class for errors raised by a practice session."""


class UnknownQuestionError(SessionError):
    pass


class AnswerAlreadyRecordedError(SessionError):
    pass
