#!/usr/bin/env python3
"""
client.py

MailchimpSubscribe: one object per Mailchimp account that owns the transport
and the interest cache, and exposes every member, interest and tag operation.
"""

from typing import Any, Dict, Iterable, List, Optional

from . import config
from .cache import CategoryCache, InterestCache
from .interests import InterestResolver, InterestSpec, is_resolved_interests
from .members import MemberUpdater, member_endpoint
from .tags import TagReconciler
from .transport import MailchimpTransport


class MailchimpSubscribe:
    """Subscribe, unsubscribe, set interests and tags on a Mailchimp audience"""

    def __init__(self, api_key: str = None, list_id: str = None,
                 transport: MailchimpTransport = None,
                 interest_cache: InterestCache = None):
        """
        Args:
            api_key: Mailchimp API key ("<key>-<dc>"), defaults to MAILCHIMP_API_KEY
            list_id: Default audience for calls that pass none
            transport: Pre-built transport (tests pass a Mock here)
            interest_cache: Pre-populated interest cache
        """
        self.transport = transport or MailchimpTransport(api_key)
        self.default_list_id = list_id or config.MAILCHIMP_LIST_ID

        self.categories = CategoryCache(self.transport, interest_cache)
        self.resolver = InterestResolver(self.categories)
        self.members = MemberUpdater(self.transport, self.resolver)
        self.tags = TagReconciler(self.transport)

    def _list(self, list_id: Optional[str]) -> str:
        resolved = list_id or self.default_list_id
        if not resolved:
            raise ValueError("No Mailchimp list id given and MAILCHIMP_LIST_ID is not set")
        return resolved

    # ═══════════════════════════════════════════════════════════════════════
    # 📋 INTERESTS
    # ═══════════════════════════════════════════════════════════════════════

    def list_interest_categories(self, list_id: str = None) -> List[Dict[str, Any]]:
        return self.categories.list_categories(self._list(list_id))

    def interest_category_info(self, category_id: str, list_id: str = None) -> Dict[str, Any]:
        return self.transport.call(
            f"/lists/{self._list(list_id)}/interest-categories/{category_id}", "GET"
        )

    def list_interests_by_category(self, category_id: str, list_id: str = None) -> List[Dict[str, Any]]:
        return self.categories.list_interests(self._list(list_id), category_id)

    def list_all_interests(self, list_id: str = None) -> List[Dict[str, Any]]:
        """Every interest of the list, from the cache after the first call"""
        return self.categories.get_all_interests(self._list(list_id))

    def parse_interests(self, interests: InterestSpec, list_id: str = None) -> Dict[str, bool]:
        """Resolve an interest spec to {interest_id: True}"""
        if is_resolved_interests(interests):
            return dict(interests)
        return self.resolver.resolve(self._list(list_id), interests)

    # ═══════════════════════════════════════════════════════════════════════
    # 👤 MEMBERS
    # ═══════════════════════════════════════════════════════════════════════

    def get_member(self, email: str, list_id: str = None) -> Dict[str, Any]:
        return self.transport.call(member_endpoint(self._list(list_id), email), "GET")

    def update_user(self, email: str, interests: InterestSpec = None,
                    merge_fields: Optional[Dict[str, str]] = None,
                    status: Optional[str] = None, list_id: str = None) -> Dict[str, Any]:
        return self.members.update_user(self._list(list_id), email, interests, merge_fields, status)

    def subscribe(self, email: str, interests: InterestSpec = None,
                  merge_fields: Optional[Dict[str, str]] = None, list_id: str = None) -> Dict[str, Any]:
        return self.members.subscribe(self._list(list_id), email, interests, merge_fields)

    def unsubscribe(self, email: str, list_id: str = None) -> Dict[str, Any]:
        return self.members.unsubscribe(self._list(list_id), email)

    # ═══════════════════════════════════════════════════════════════════════
    # 🏷️ TAGS
    # ═══════════════════════════════════════════════════════════════════════

    def assign_tags_to_user(self, email: str, tag_names: Iterable[str],
                            create_if_missing: bool = False, list_id: str = None) -> Dict[str, List[Dict[str, Any]]]:
        return self.tags.assign_tags_to_user(self._list(list_id), email, tag_names, create_if_missing)

    def remove_tags(self, email: str, tag_names: Iterable[str], list_id: str = None) -> List[Dict[str, Any]]:
        return self.tags.remove_tags(self._list(list_id), email, tag_names)

    def get_tags_by_user(self, email: str, list_id: str = None) -> List[str]:
        return self.tags.get_tags_by_user(self._list(list_id), email)
