from fastapi import HTTPException


class MessageRequiredException(HTTPException):
    def __init__(self, detail: str = "Message required"):
        super().__init__(status_code=400, detail=detail)


class InvalidJSONException(HTTPException):
    def __init__(self, detail: str = "Invalid JSON"):
        super().__init__(status_code=400, detail=detail)


class InvalidBodyException(HTTPException):
    def __init__(self, detail: str = "Invalid request body"):
        super().__init__(status_code=400, detail=detail)


class PayloadTooLargeException(HTTPException):
    def __init__(self, detail: str = "Payload too large"):
        super().__init__(status_code=413, detail=detail)


class ChatProcessingException(HTTPException):
    def __init__(self, detail: str = "Chat processing failed"):
        super().__init__(status_code=500, detail=detail)


class VoiceProcessingException(HTTPException):
    def __init__(self, detail: str = "Voice processing failed"):
        super().__init__(status_code=500, detail=detail)
