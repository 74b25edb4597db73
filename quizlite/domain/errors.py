# START OF FILE: quizlite/domain/errors.py


class QuizError(Exception):
    """Base class for every error raised by the quiz backend."""


class ConfigError(QuizError):
    """The quiz document is missing or cannot be parsed."""


class ValidationError(QuizError):
    """An admin write was rejected; the stored document is untouched."""


class CatalogLookupError(QuizError):
    """A single product lookup failed (transport, auth or GraphQL error)."""

    def __init__(self, handle: str, reason: str):
        super().__init__(f"Lookup for '{handle}' failed: {reason}")
        self.handle = handle
        self.reason = reason


class WizardError(QuizError):
    """An interaction the current wizard step cannot accept."""

# END OF FILE: quizlite/domain/errors.py
