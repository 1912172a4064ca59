class YatError(Exception):
    """Base exception for all yat errors."""
    pass

class RecoverableError(YatError):
    """An error that can be recovered from without data loss."""
    pass

class FatalError(YatError):
    """An error that requires application termination or major intervention."""
    pass

class InvariantViolation(FatalError):
    """An out-of-range location or depth violation reached a tree operation."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from bad encodings in the save file, to just unknown data"""
    pass

class ParseError(CorruptionError):
    """A single malformed line in a save file."""

    def __init__(self, line: int, reason: str):
        super().__init__(f"line {line}: {reason}")
        self.line = line
        self.reason = reason

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.line, self.reason) == (other.line, other.reason)

    def __hash__(self):
        return hash((self.line, self.reason))

class ConfigError(FatalError):
    """The configuration file exists but cannot be used."""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass
