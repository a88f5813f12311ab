"""Domain errors raised by the service layer.

All of them are ``ValueError`` subclasses, so a controller that only cares
about "the operation failed" can keep catching ``ValueError``.
"""


class NotFoundError(ValueError):
    """The requested record does not exist."""


class ValidationError(ValueError):
    """A record failed its domain rules.

    ``errors`` maps a field name to the list of messages for that field.
    """

    def __init__(self, errors, message="Validation failed"):
        super().__init__(message)
        self.errors = errors

    def full_messages(self):
        return [f"{field.replace('_', ' ').capitalize()} {msg}"
                for field, msgs in self.errors.items() for msg in msgs]


class ConflictError(ValueError):
    """The change is blocked by the state of other records."""


class PersistenceError(ValueError):
    """The store refused a save or a destroy."""
