#!/usr/bin/env python3
"""
members.py

Member addressing and upserts.
"""

import hashlib
import logging
from typing import Any, Dict, Optional

from . import config
from .interests import InterestResolver, InterestSpec, is_resolved_interests
from .transport import MailchimpTransport

logger = logging.getLogger(__name__)


def calculate_subscriber_hash(email: str) -> str:
    """Calculate MD5 hash of lowercase email address for Mailchimp API."""
    return hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()


def member_endpoint(list_id: str, email: str) -> str:
    return f"/lists/{list_id}/members/{calculate_subscriber_hash(email)}"


class MemberUpdater:
    """Builds and sends one member upsert (PUT) per call"""

    def __init__(self, transport: MailchimpTransport, resolver: InterestResolver):
        self.transport = transport
        self.resolver = resolver

    def build_payload(self, email: str, interests: Dict[str, bool],
                      merge_fields: Optional[Dict[str, str]] = None,
                      status: Optional[str] = None) -> Dict[str, Any]:
        """
        Assemble the upsert body.

        With a status, both "status" and "status_if_new" carry it. Without
        one, only "status_if_new" is sent so an existing member keeps theirs.
        """
        payload: Dict[str, Any] = {"email_address": email}

        if status:
            payload["status"] = status
            payload["status_if_new"] = status
        else:
            payload["status_if_new"] = config.DEFAULT_STATUS_IF_NEW

        if interests:
            payload["interests"] = interests

        if merge_fields is not None:
            payload["merge_fields"] = merge_fields

        return payload

    def update_user(self, list_id: str, email: str, interests: InterestSpec = None,
                    merge_fields: Optional[Dict[str, str]] = None,
                    status: Optional[str] = None) -> Dict[str, Any]:
        """Resolve interests if needed, then upsert the member"""
        if is_resolved_interests(interests):
            resolved = dict(interests)
        else:
            resolved = self.resolver.resolve(list_id, interests)

        payload = self.build_payload(email, resolved, merge_fields, status)
        logger.info(f"📝 Upserting {email} in list {list_id} "
                    f"(status: {payload.get('status', 'unchanged')}, interests: {len(resolved)})")
        return self.transport.call(member_endpoint(list_id, email), "PUT", payload)

    def subscribe(self, list_id: str, email: str, interests: InterestSpec = None,
                  merge_fields: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return self.update_user(list_id, email, interests, merge_fields, "subscribed")

    def unsubscribe(self, list_id: str, email: str) -> Dict[str, Any]:
        return self.update_user(list_id, email, None, None, "unsubscribed")
