#!/usr/bin/env python3
"""
cache.py

Per-list memoization of every interest in an audience.

The first lookup for a list fetches its interest categories and then all of
their interests in parallel; later lookups are served from memory for the
lifetime of the owning client. Entries are never refreshed, so interests
added on Mailchimp after the first fetch stay invisible until restart.

Two simultaneous first lookups for the same list both hit the API; the
second write stores an identical value.

Fan-out is capped at MAX_WORKERS threads, so with more categories than
that the later interest fetches start only as earlier ones finish.
"""

import logging
from typing import Any, Dict, List, Optional

from . import config
from .fanout import fan_out
from .transport import MailchimpTransport, extract_list_field

logger = logging.getLogger(__name__)


class InterestCache:
    """Flattened interests per list id"""

    def __init__(self, entries: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self._entries = dict(entries or {})

    def get(self, list_id: str) -> Optional[List[Dict[str, Any]]]:
        return self._entries.get(list_id)

    def put(self, list_id: str, interests: List[Dict[str, Any]]) -> None:
        self._entries[list_id] = interests

    def __contains__(self, list_id: str) -> bool:
        return list_id in self._entries


class CategoryCache:
    """Answers "what interests exist for this list" with one fetch per list"""

    def __init__(self, transport: MailchimpTransport, cache: InterestCache = None):
        self.transport = transport
        self.cache = cache if cache is not None else InterestCache()

    def list_categories(self, list_id: str) -> List[Dict[str, Any]]:
        """Fetch the interest categories of a list"""
        body = self.transport.call(
            f"/lists/{list_id}/interest-categories", "GET",
            params={"count": config.PAGE_COUNT}
        )
        return extract_list_field(body, "categories")

    def list_interests(self, list_id: str, category_id: str) -> List[Dict[str, Any]]:
        """Fetch the interests of one category"""
        body = self.transport.call(
            f"/lists/{list_id}/interest-categories/{category_id}/interests", "GET",
            params={"count": config.PAGE_COUNT}
        )
        return extract_list_field(body, "interests")

    def get_all_interests(self, list_id: str) -> List[Dict[str, Any]]:
        """
        Return every interest of a list, each tagged with its category_id.

        Interests keep the order their categories were returned in. Nothing
        is stored unless every fetch succeeded.
        """
        cached = self.cache.get(list_id)
        if cached is not None:
            logger.debug(f"Interest cache hit for list {list_id}")
            return cached

        categories = self.list_categories(list_id)
        logger.info(f"📋 Fetching interests for {len(categories)} categories of list {list_id}")

        per_category = fan_out(
            lambda category: self.list_interests(list_id, category["id"]),
            categories
        )

        interests = []
        seen_ids = set()
        for category, category_interests in zip(categories, per_category):
            for interest in category_interests:
                if interest.get("id") in seen_ids:
                    continue
                seen_ids.add(interest.get("id"))
                interests.append(dict(interest, category_id=category["id"]))

        self.cache.put(list_id, interests)
        logger.info(f"✅ Cached {len(interests)} interests for list {list_id}")
        return interests
