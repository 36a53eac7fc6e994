"""Shared exceptions for service layer operations."""


class NotFoundError(Exception):
    """
    Base class for "does not exist or is not yours" conditions.

    Routers surface every subclass as 404 so a foreign resource is
    indistinguishable from a missing one.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class BookmarkNotFoundError(NotFoundError):
    """Raised when a bookmark does not exist or belongs to another user."""

    def __init__(self, bookmark_id: int) -> None:
        self.bookmark_id = bookmark_id
        super().__init__("Bookmark not found")


class CollectionNotFoundError(NotFoundError):
    """Raised when a collection does not exist or belongs to another user."""

    def __init__(self, collection_id: int) -> None:
        self.collection_id = collection_id
        super().__init__("Collection not found")


class InvalidCollectionError(NotFoundError):
    """Raised when a bookmark references a collection the caller does not own."""

    def __init__(self, collection_id: int) -> None:
        self.collection_id = collection_id
        super().__init__("Invalid collection")


class InvalidParentCollectionError(NotFoundError):
    """Raised when a collection's parent is missing or owned by another user."""

    def __init__(self, parent_id: int) -> None:
        self.parent_id = parent_id
        super().__init__("Invalid parent collection")


class ValidationError(Exception):
    """Base class for request-level validation failures surfaced as 400."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class NothingToUpdateError(ValidationError):
    """Raised when a partial update carries no recognized fields."""

    def __init__(self) -> None:
        super().__init__("No fields to update")


class CollectionCycleError(ValidationError):
    """Raised when moving a collection under itself or one of its descendants."""

    def __init__(self, collection_id: int, parent_id: int) -> None:
        self.collection_id = collection_id
        self.parent_id = parent_id
        super().__init__("Invalid parent collection: a collection cannot be moved into itself")


class UserAlreadyExistsError(ValidationError):
    """Raised on signup when the username or email is taken."""

    def __init__(self) -> None:
        super().__init__("Username or email already exists")
