"""Translate service exceptions into API errors."""

from fastapi import HTTPException, status

from api.models.responses import ErrorCodes


def split_details(message: str) -> list[str]:
    """Multi-line service messages become one detail per line."""
    return [line.strip() for line in message.split("\n") if line.strip()]


def validation_error(exc: ValueError, error: str = "Validation failed") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "error": error,
            "code": ErrorCodes.VALIDATION_ERROR,
            "details": split_details(str(exc)),
        },
    )


def not_found(exc: KeyError) -> HTTPException:
    # KeyError wraps its message in quotes; args[0] is the plain text
    message = exc.args[0] if exc.args else "Not found"
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": str(message), "code": ErrorCodes.NOT_FOUND, "details": []},
    )


def invalid_request(error: str, details: list[str] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": error, "code": ErrorCodes.INVALID_REQUEST, "details": details or []},
    )


def conflict(error: str, details: list[str]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"error": error, "code": ErrorCodes.CONFLICT, "details": details},
    )
