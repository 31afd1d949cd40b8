class BillExtractorError(Exception):
    """Base error; ``status_code`` is the HTTP status the API responds with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UploadRejected(BillExtractorError):
    status_code = 400


class ExtractionError(BillExtractorError):
    """The uploaded bytes could not be read as a PDF."""

    status_code = 422


class InvocationError(BillExtractorError):
    def __init__(self, model: str, message: str):
        super().__init__(f"{model}: {message}")
        self.model = model


class ParseError(BillExtractorError):
    def __init__(self, model: str, message: str):
        super().__init__(f"{model}: {message}")
        self.model = model


class NoUsableData(BillExtractorError):
    status_code = 422
