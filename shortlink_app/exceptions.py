"""
Exceptions raised by the service layer.
"""


class ShortLinkError(Exception):
    """Base class for short link service errors"""


class ShortCodeGenerationError(ShortLinkError):
    """No free short code could be found within the retry budget"""
