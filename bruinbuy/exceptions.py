from __future__ import annotations


class BruinBuyException(Exception):
    pass


class ValidationError(BruinBuyException):
    pass


class TransportError(BruinBuyException):
    pass


class ServerError(BruinBuyException):
    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(BruinBuyException):
    pass


class InitError(BruinBuyException):
    pass


_EXIT_CODE_MAP: dict[type[BaseException], int] = {
    InitError: 2,
}

_DEFAULT_EXIT_CODE = 1
_KEYBOARD_INTERRUPT_EXIT_CODE = 5


def map_exception_to_exit_code(exc: BaseException) -> int:
    if isinstance(exc, KeyboardInterrupt):
        return _KEYBOARD_INTERRUPT_EXIT_CODE
    for exc_type, code in _EXIT_CODE_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return _DEFAULT_EXIT_CODE
