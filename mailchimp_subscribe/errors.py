"""
errors.py

Exceptions raised by the Mailchimp audience client.
"""

from typing import Any, List, Optional


class MailchimpSubscribeError(Exception):
    """Base class for every error this package raises"""


class TransportError(MailchimpSubscribeError):
    """A Mailchimp API call failed (non-success status or network failure)"""

    def __init__(self, detail: str, status_code: Optional[int] = None,
                 endpoint: Optional[str] = None, method: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.endpoint = endpoint
        self.method = method


class DataFormatError(MailchimpSubscribeError):
    """A response did not carry the list field it should have"""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class TagsNotFoundError(MailchimpSubscribeError):
    """Requested tags have no matching segment and creation was not allowed"""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Tags not found: {', '.join(self.missing)}")
