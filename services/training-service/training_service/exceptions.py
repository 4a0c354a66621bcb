from fastapi import HTTPException, status


class NotFoundException(HTTPException):
    """Raised for rows that are missing or owned by another user; both look the same to the caller."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class FieldValidationException(HTTPException):
    def __init__(self, errors: dict[str, str], detail: str = "Validation failed"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
        self.errors = errors


class InvalidStateException(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class MesocycleNotActiveException(InvalidStateException):
    def __init__(self):
        super().__init__(detail="The mesocycle is not active")


class MesocycleReadOnlyException(InvalidStateException):
    def __init__(self):
        super().__init__(detail="Completed mesocycles cannot be edited")
