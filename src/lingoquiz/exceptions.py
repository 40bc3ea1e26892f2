class QuizEngineError(Exception):
    """Base exception for the quiz session engine."""
    pass


class InvalidStateTransition(QuizEngineError):
    """Raised when an operation is invoked outside its valid source phase."""

    def __init__(self, operation: str, phase: str, message: str = ""):
        self.operation = operation
        self.phase = phase
        self.message = message or f"Cannot {operation} while session is {phase}"
        super().__init__(self.message)


class InvalidConfiguration(QuizEngineError):
    """Raised when a session or sampler is configured with malformed input."""

    def __init__(self, field: str, value, message: str = "Invalid configuration"):
        self.field = field
        self.value = value
        self.message = f"{message}: {field}={value!r}"
        super().__init__(self.message)


class EmptyWordPool(QuizEngineError):
    """The filtered word pool produced zero questions.

    The engine itself never raises this; it reports the condition as the
    ``no_questions`` phase. Collaborators that must refuse an empty pool
    outright can raise it.
    """

    def __init__(self, category: str, message: str = "Nothing to practice"):
        self.category = category
        self.message = message
        super().__init__(message)
