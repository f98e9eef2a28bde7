from fastapi import status


class ExamPinError(Exception):
    """Base class for errors raised by the exam services and stores."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)
        self.detail = detail


class ConfigError(ExamPinError):
    pass


class InvalidPayload(ExamPinError):
    status_code = status.HTTP_400_BAD_REQUEST


class PinMismatch(InvalidPayload):
    def __init__(self, detail: str = "PIN does not match this exam"):
        super().__init__(detail)


class ExamNotFound(ExamPinError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, detail: str = "Exam not found"):
        super().__init__(detail)


class UnsupportedOperation(ExamPinError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED


class StorageError(ExamPinError):
    pass


class PinAllocationError(StorageError):
    pass


class PinTaken(StorageError):
    """Raised by a store when the PIN of a new exam is already in use."""

    def __init__(self, detail: str = "PIN already in use"):
        super().__init__(detail)
