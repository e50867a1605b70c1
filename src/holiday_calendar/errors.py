class CalendarError(Exception):
    pass


class NullArgumentError(CalendarError, TypeError):
    pass


class OutOfRangeError(CalendarError, ValueError):
    pass


class InvalidRangeError(CalendarError, ValueError):
    pass


class UnknownNameError(CalendarError, KeyError):

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0]) if self.args else ""


class MissingDependencyError(CalendarError, ImportError):
    pass


class DataProviderError(CalendarError, RuntimeError):
    pass


def require(value, arg_name: str):
    """Return value unchanged, raising NullArgumentError if it is None."""
    if value is None:
        raise NullArgumentError(f"Argument '{arg_name}' must not be None")
    return value
