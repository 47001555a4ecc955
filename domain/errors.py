class DomainError(Exception):
    code = "E_DOMAIN"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class InvalidSizeError(DomainError):
    code = "E_INVALID_SIZE"


class UnsupportedFormatError(DomainError):
    code = "E_UNSUPPORTED_FORMAT"


class MalformedInputError(DomainError):
    code = "E_MALFORMED_INPUT"


class ConversionFailedError(DomainError):
    code = "E_CONVERSION_FAILED"


class LogoNotFoundError(DomainError):
    code = "E_LOGO_NOT_FOUND"
