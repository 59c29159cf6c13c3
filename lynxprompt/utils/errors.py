import logging

from fastapi import HTTPException, status

logger = logging.getLogger("lynxprompt.errors")


def internal_error(
    log_message: str,
    *,
    user_message: str = "Internal server error",
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> HTTPException:
    logger.error(log_message, exc_info=True)
    return HTTPException(status_code=status_code, detail=user_message)


def not_found(user_message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=user_message)
