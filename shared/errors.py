"""
Error taxonomy shared by the stock ledger and the order engine.

ValidationFailed  - bad or inconsistent input, raised before any write happens
NotFoundError     - a referenced record does not exist
TransactionFailed - the database refused the unit of work (e.g. a unique-number race)
"""


class DomainError(Exception):
    """Base class for errors the HTTP layer knows how to translate."""


class ValidationFailed(DomainError, ValueError):
    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items()))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailed":
        return cls({field: [message]})

    def as_detail(self) -> list[dict]:
        """Shape the errors like FastAPI's own request-validation detail."""
        detail = []
        for field, messages in self.errors.items():
            loc = ["body", *[int(p) if p.isdigit() else p for p in field.split(".")]]
            for msg in messages:
                detail.append({"loc": loc, "msg": msg, "type": "value_error"})
        return detail


class NotFoundError(DomainError, LookupError):
    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")


class TransactionFailed(DomainError):
    pass


def to_http_exception(exc: DomainError):
    """Translate a domain error into the HTTPException the routers raise."""
    from fastapi import HTTPException, status

    if isinstance(exc, ValidationFailed):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.as_detail())
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
