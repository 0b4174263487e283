class QuizgenError(Exception):
    """Base class for failures of an external collaborator or of parsing."""


class FetchError(QuizgenError):
    pass


class ExtractError(QuizgenError):
    pass


class ModelError(QuizgenError):
    pass


class ParseError(QuizgenError):
    pass


class AssemblyError(QuizgenError):
    pass


class DeadlineExceeded(QuizgenError):
    pass
