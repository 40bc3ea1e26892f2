from .engine import QuizSession
from .exceptions import (
    EmptyWordPool,
    InvalidConfiguration,
    InvalidStateTransition,
    QuizEngineError,
)
from .generator import generate
from .sampler import sample
from .timer import CountdownTimer
