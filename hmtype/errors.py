"""
Error taxonomy shared by the parser and the type checker
"""

from typing import Any, List, Optional


class HMTypeError(Exception):
    """Base class for every error reported to the user"""

    def __init__(self, message: str) -> None:
        self.message = message
        self.context: List[str] = []
        super().__init__(message)

    def with_context(self, note: str) -> "HMTypeError":
        """Attach a propagation note and return the same error for re-raising"""
        self.context.append(note)
        return self

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return self.message + "".join(f"\n  {note}" for note in self.context)


class ParseError(HMTypeError):
    """Raised when source text cannot be lexed or parsed"""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{message} at {line}:{column}"
        super().__init__(message)


class TypeInferenceError(HMTypeError):
    """Raised when an expression is ill-typed"""

    def __init__(self, message: str, node: Optional[Any] = None) -> None:
        self.node = node
        super().__init__(message)
