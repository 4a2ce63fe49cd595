class LmsException(Exception):
    """Base exception for the LMS service"""

    def __init__(self, message: str = "LMS error"):
        self.message = message
        super().__init__(self.message)


class BadRequestException(LmsException):
    """Exception for Bad Request (400)"""

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class UnauthorizedException(LmsException):
    """Exception for Unauthorized (401)"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AccessDeniedException(LmsException):
    """Exception for Forbidden (403)"""

    def __init__(self, message: str = "Access Denied"):
        super().__init__(message)


class ResourceNotFoundException(LmsException):
    """Exception for Not Found (404)"""

    def __init__(self, message: str = "Resource Not Found"):
        super().__init__(message)


class PaymentProviderException(LmsException):
    """Payment provider call failed (502)"""

    def __init__(self, message: str = "Payment provider error"):
        super().__init__(message)
