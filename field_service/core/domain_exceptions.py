class DomainException(Exception):
    """A business-rule failure that maps onto an API error envelope."""

    def __init__(self, code: str, message: str, status_code: int = 400):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class NotFoundException(DomainException):
    def __init__(self, code: str, message: str):
        super().__init__(code=code, message=message, status_code=404)
