"""
Mailchimp Subscribe - Audience Client Package

This package manages a Mailchimp audience: subscribing and unsubscribing
members, setting interest flags by human-readable name, and keeping tag
(static segment) membership in line with what the caller asks for.

Core modules:
- config: Environment-driven settings (API key, datacenter, retries)
- transport: Authenticated requests session for the Mailchimp 3.0 API
- cache: Per-list memoization of the categories → interests graph
- interests: Interest spec normalization and name → id resolution
- tags: Tag reconciliation against existing segments
- members: Subscriber hashing and member upserts
- client: MailchimpSubscribe facade wiring everything together
- main: Command-line control center
"""

__version__ = "2.0.0"

from .client import MailchimpSubscribe
from .errors import (
    MailchimpSubscribeError,
    TransportError,
    DataFormatError,
    TagsNotFoundError,
)

__all__ = [
    'MailchimpSubscribe',
    'MailchimpSubscribeError',
    'TransportError',
    'DataFormatError',
    'TagsNotFoundError',
]
