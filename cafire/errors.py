"""Exception types raised by CAFIRE."""


class CafireError(Exception):
    """Base class for every error CAFIRE raises on purpose."""


class DatasetError(CafireError):
    """The input file is missing, unreadable or empty."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot load fire dataset '{self.path}': {reason}")


class SchemaError(DatasetError):
    """A required column could not be found in the input file."""


class ConfigError(CafireError):
    """Bad report configuration (unknown variant, locale, or YAML file)."""
