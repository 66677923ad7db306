"""CI Game exceptions."""


class CIGameError(Exception):
    """Base exception for all CI Game errors."""


class UnsupportedEvaluationError(CIGameError, NotImplementedError):
    """Raised when a rule is evaluated through an entry point it does not support.

    This signals misuse by the host and is never caught inside the library.
    """

    def __init__(self, rule_name: str, message: str | None = None):
        self.rule_name = rule_name
        super().__init__(
            message
            or f"Rule '{rule_name}' must be evaluated against a previous build"
        )
