# music_bands/domain/errors.py

"""Error taxonomy shared by the collection engine and its front end."""

from __future__ import annotations


class BandCollectionError(Exception):
    """Base class for all expected, user-reportable failures."""


class ValidationError(BandCollectionError, ValueError):
    """An entity field violates one of its invariants."""


class DuplicateIdError(ValidationError):
    """A band with the same ID is already stored."""


class NotFoundError(BandCollectionError, LookupError):
    """No band with the requested ID exists."""


class InputFormatError(BandCollectionError, ValueError):
    """A textual argument could not be parsed into the expected type."""


class PersistenceError(BandCollectionError):
    """The collection file could not be read, parsed or written."""


class ScriptError(BandCollectionError):
    """A script file could not be executed."""
