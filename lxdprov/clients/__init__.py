from .transport import ApiTransport

__all__ = [
    "ApiTransport",
]
