"""Repository identifier errors."""

from __future__ import annotations


class IdentityError(ValueError):
    """Base class for identifier parsing and resolution failures."""

    def __init__(self, message: str, *, identifier: str) -> None:
        """Initialise with a message and the offending identifier."""
        self.identifier = identifier
        super().__init__(message)


class InvalidIdentifierError(IdentityError):
    """Raised when no identifier grammar matches the input."""

    @classmethod
    def no_match(cls, identifier: str) -> InvalidIdentifierError:
        """Return an error for input outside every supported grammar."""
        return cls(f"Invalid identifier: {identifier!r}", identifier=identifier)

    @classmethod
    def not_a_url(cls, identifier: str) -> InvalidIdentifierError:
        """Return an error for a canonical id where a checkout URL is needed."""
        return cls(
            f"Identifier {identifier!r} is not a checkout URL",
            identifier=identifier,
        )


class UnresolvableIdentifierError(IdentityError):
    """Raised when an identifier cannot be turned into a Locator."""

    @classmethod
    def unrecognised(cls, identifier: str) -> UnresolvableIdentifierError:
        """Return an error for input matching neither URL nor canonical id."""
        return cls(
            f"Cannot resolve identifier {identifier!r}: "
            "not a checkout URL or canonical repository id",
            identifier=identifier,
        )

    @classmethod
    def bad_full_name(
        cls, identifier: str, full_name: object
    ) -> UnresolvableIdentifierError:
        """Return an error when GitHub returns an unusable ``full_name``."""
        return cls(
            f"Cannot resolve identifier {identifier!r}: "
            f"unexpected repository full_name {full_name!r}",
            identifier=identifier,
        )
