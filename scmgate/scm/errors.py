"""Repository operation errors."""

from __future__ import annotations


class NotAFileError(ValueError):
    """Raised when a content path resolves to something other than a file.

    Attributes
    ----------
    path
        Repository path that was requested.
    content_type
        Type GitHub reported for the path, such as ``dir`` or ``symlink``.

    """

    def __init__(self, message: str, *, path: str, content_type: str | None) -> None:
        """Initialise with the requested path and reported type."""
        self.path = path
        self.content_type = content_type
        super().__init__(message)

    @classmethod
    def for_path(cls, path: str, content_type: str | None) -> NotAFileError:
        """Return an error for ``path`` pointing at a non-file entry."""
        return cls(
            f"Path ({path}) does not point to file",
            path=path,
            content_type=content_type,
        )
