class VCardError(Exception):
    """Base class for every error raised while producing a vCard."""


class InputError(VCardError):
    """The caller supplied a missing or malformed card identifier."""


class NotFoundError(VCardError):
    """The referenced card does not exist (or is not visible) in storage."""


class ProfileStoreError(VCardError):
    """Profile storage is unreachable or returned unreadable data."""


class PhotoFetchError(VCardError):
    """
    The photo could not be retrieved.

    Always recovered by the photo embedder, never surfaced to callers.
    """


class EncodingInvariantViolation(VCardError):
    """
    Escaping or folding produced a document that breaks the vCard grammar.

    This is a logic bug, not an input problem, so it always escalates.
    """
