# =============================================================================
# core/errors.py  —  Error constructors and the ToolFailure exception
# =============================================================================
#
# Tool-level failures travel as VALUES (ToolError) through handlers and the
# dispatcher.  A few code paths sit deeper than a handler and have to unwind
# the stack instead (the Gemini client, the tools-list request).  Those
# raise ToolFailure, which carries an already-categorised ToolError.  The
# dispatcher turns a ToolFailure back into its ToolError untouched, while
# any OTHER exception is rewrapped as an internal error.
# =============================================================================

from core.models import ErrorCode, ToolError


class ToolFailure(Exception):
    """Raised when a recognised ToolError has to unwind the stack."""

    def __init__(self, error: ToolError):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code


def invalid_params(message: str) -> ToolError:
    return ToolError(ErrorCode.INVALID_PARAMS, message)


def method_not_found(message: str) -> ToolError:
    return ToolError(ErrorCode.METHOD_NOT_FOUND, message)


def internal_error(message: str) -> ToolError:
    return ToolError(ErrorCode.INTERNAL_ERROR, message)
