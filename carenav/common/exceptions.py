from fastapi import HTTPException, status


class UnknownCategoryError(ValueError):
    """Raised when an issue category is not one of the supported five."""

    def __init__(self, category: object):
        self.category = category
        super().__init__(f"Unknown issue type: {category}")


class ResolutionParseError(ValueError):
    """Raised when generated output does not form a valid resolution map."""


class CareNavException(HTTPException):
    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundError(CareNavException):
    def __init__(self, resource: str, resource_id: str | None = None):
        detail = f"{resource} not found"
        if resource_id:
            detail = f"{resource} '{resource_id}' not found"
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)


class BadRequestError(CareNavException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class PayloadTooLargeError(CareNavException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)


class RateLimitExceededError(CareNavException):
    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            detail="Too many requests. Please try again later.",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(retry_after)},
        )

