# openmensa_berlin/errors.py
# Fehler beim Abruf, bei der Extraktion und beim Schreiben der Feeds


class FetchError(Exception):
    """A POST against the upstream site did not yield a document."""

    def __init__(self, message, url, params=None):
        super().__init__(message)
        self.url = url
        self.params = params


class RetriesExhausted(FetchError):
    pass


class UnexpectedStatus(FetchError):
    def __init__(self, message, url, params=None, status=None):
        super().__init__(message, url, params)
        self.status = status


class CorruptResponse(FetchError):
    pass


class InvariantViolation(Exception):
    """Extracted or serialized data breaks an internal contract.

    This is a bug in the extraction logic (or a drastic markup change), never
    something to coerce silently.
    """


class InvalidIdentifier(ValueError):
    pass
