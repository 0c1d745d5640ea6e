class InputError(ValueError):
    """Bad user input or template metadata."""


class LocationParseError(InputError):
    pass


class ConfigError(ValueError):
    pass


class CheckoutError(RuntimeError):
    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
