class DaylistError(Exception):
    """Base exception for all daylist errors."""
    pass

class RecoverableError(DaylistError):
    """An error that can be recovered from without data loss."""
    pass

class FatalError(DaylistError):
    """An error that requires application termination or major intervention."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in data formats, to just unknown data"""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass

class ValidationError(RecoverableError, ValueError):
    """A required text field is blank or a field value is not acceptable."""
    pass

class SubtaskIndexError(RecoverableError, IndexError):
    """Checklist position does not exist on the open task."""
    pass

class NotFoundError(RecoverableError, LookupError):
    """No task with the requested id."""
    pass
