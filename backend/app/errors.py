"""Domain errors raised by the controllers and mapped to HTTP by the app."""


class NotFoundError(Exception):
    """Entity is absent or not owned by the caller.

    The two cases are deliberately indistinguishable to callers.
    """

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
