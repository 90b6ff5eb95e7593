#!/usr/bin/env python3
"""
interests.py

Turns human-facing interest specs into Mailchimp's {interest_id: True} payload.

Accepted spec shapes:
    None                                   → nothing requested
    "Membership:Free,Topics:News:Sport"    → delimited string
    {"Membership": "Free"}                 → category title → interest name
    {"Topics": ["News", "Sport"]}          → category title → interest names

Keys are matched against interest category titles. Keys naming no category
are ignored, and only requested interests appear in the result.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Union

from .cache import CategoryCache
from .fanout import fan_out

logger = logging.getLogger(__name__)

InterestSpec = Union[None, str, Mapping]


def parse_interest_string(spec: str) -> Dict[str, List[str]]:
    """
    Parse "key1:value1,key2:value2a:value2b" into {key: [values]}.

    A bare key with no colon gets [""]. A repeated key extends its list.
    """
    parsed: Dict[str, List[str]] = {}
    for chunk in spec.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        key, *values = [part.strip() for part in chunk.split(":")]
        parsed.setdefault(key, []).extend(values or [""])
    return parsed


def is_resolved_interests(spec: Any) -> bool:
    """True for a payload that is already {interest_id: bool}"""
    return isinstance(spec, Mapping) and all(isinstance(v, bool) for v in spec.values())


def normalize_interest_spec(spec: InterestSpec) -> Dict[str, List[str]]:
    """Bring every accepted spec shape to {key: [value, ...]}"""
    if spec is None:
        return {}

    if isinstance(spec, str):
        return parse_interest_string(spec)

    if isinstance(spec, Mapping):
        normalized: Dict[str, List[str]] = {}
        for key, value in spec.items():
            if isinstance(value, str):
                normalized[key] = [value]
            elif isinstance(value, (list, tuple)):
                normalized[key] = [str(v) for v in value]
            else:
                raise TypeError(f"Interest values for '{key}' must be a string or a list of strings, "
                                f"got {type(value).__name__}")
        return normalized

    raise TypeError(f"Unsupported interest spec type: {type(spec).__name__}")


class InterestResolver:
    """Resolves interest names to ids, one category at a time"""

    def __init__(self, categories: CategoryCache):
        self.categories = categories

    def resolve(self, list_id: str, spec: InterestSpec) -> Dict[str, bool]:
        """
        Return {interest_id: True} for every requested interest found.

        Always fetches categories fresh (titles are needed, not the flattened
        cache), then fetches interests of every matched category in parallel.
        """
        wanted = normalize_interest_spec(spec)
        if not wanted:
            return {}

        title_to_id: Dict[str, str] = {}
        for category in self.categories.list_categories(list_id):
            title_to_id.setdefault(category.get("title"), category["id"])

        matched = [(title_to_id[key], values) for key, values in wanted.items() if key in title_to_id]
        ignored = [key for key in wanted if key not in title_to_id]
        if ignored:
            logger.debug(f"Ignoring interest keys with no matching category: {ignored}")

        per_category = fan_out(
            lambda match: self.categories.list_interests(list_id, match[0]),
            matched
        )

        resolved: Dict[str, bool] = {}
        for (_, values), interests in zip(matched, per_category):
            for interest in interests:
                if interest.get("name") in values:
                    resolved[interest["id"]] = True

        logger.debug(f"Resolved {len(resolved)} interests for list {list_id}")
        return resolved
