from contextlib import contextmanager
from fastapi import HTTPException, Request, status
import logging

from .config import Settings
from .errors import ExamPinError, StorageError
from .storage.base import ExamStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> ExamStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@contextmanager
def http_errors(action: str):
    """
    Turn service/store errors into HTTPExceptions.
    Client errors keep their message; storage and unexpected failures are logged and answered with a generic 500.
    """
    try:
        yield
    except HTTPException:
        raise
    except StorageError:
        logger.exception("Storage error while %s", action)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
    except ExamPinError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception:
        logger.exception("Unexpected error while %s", action)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
