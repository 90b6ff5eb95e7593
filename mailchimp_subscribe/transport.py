#!/usr/bin/env python3
"""
transport.py

Authenticated HTTP access to the Mailchimp Marketing API (v3.0).
Every other module talks to Mailchimp only through MailchimpTransport.call().
"""

import json
import time
import logging
import requests
from typing import Any, Dict, Optional

from . import config
from .errors import TransportError, DataFormatError

logger = logging.getLogger(__name__)


class MailchimpTransport:
    """Sends JSON requests to one Mailchimp datacenter with basic auth"""

    def __init__(self, api_key: str = None, dc: str = None,
                 session: requests.Session = None,
                 max_retries: int = None, retry_delay: float = None,
                 timeout: float = None):
        """Initialize the transport"""
        self.api_key = (api_key if api_key is not None else config.MAILCHIMP_API_KEY).strip()
        if not self.api_key:
            raise ValueError("Mailchimp API key not properly configured")

        self.dc = dc or config.get_mailchimp_datacenter(self.api_key)
        if not self.dc:
            raise ValueError("Could not determine Mailchimp datacenter from API key")

        self.base_url = f"https://{self.dc}.api.mailchimp.com/3.0"

        self.session = session or requests.Session()
        self.session.auth = ("anystring", self.api_key)
        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': 'Mailchimp-Subscribe/2.0'
        })

        self.max_retries = max_retries if max_retries is not None else config.MAX_RETRIES
        self.retry_delay = retry_delay if retry_delay is not None else config.RETRY_DELAY
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT

    def call(self, endpoint: str, method: str = "GET", payload: Any = None,
             params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform one API request and return the decoded JSON body.

        Args:
            endpoint: Path below the 3.0 root, e.g. "/lists/abc/segments"
            method: GET, POST, PUT, PATCH or DELETE
            payload: JSON-serializable body, omitted when None
            params: Optional query string parameters

        Raises:
            TransportError: on a non-2xx response (carrying Mailchimp's
                "detail" text) or once network retries are exhausted
        """
        method = method.upper()
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"{method} {url}")
        if payload is not None:
            logger.debug(f"Payload: {json.dumps(payload)}")

        attempts = max(self.max_retries, 1)
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method, url, json=payload, params=params, timeout=self.timeout
                )
                break
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                if attempt < attempts - 1:
                    logger.warning(f"Mailchimp API request failed for {method} {endpoint}: {e}. "
                                   f"Retrying in {self.retry_delay} seconds...")
                    time.sleep(self.retry_delay)
                else:
                    logger.error(f"❌ Mailchimp API unreachable after {attempts} attempts: {e}")
                    raise TransportError(str(e), None, endpoint, method) from e

        logger.debug(f"Mailchimp response status for {method} {endpoint}: {response.status_code}")

        if not 200 <= response.status_code < 300:
            detail = self._error_detail(response)
            logger.error(f"❌ Mailchimp {method} {endpoint} failed: {response.status_code} - {detail}")
            raise TransportError(detail, response.status_code, endpoint, method)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            logger.error(f"❌ Mailchimp {method} {endpoint} returned a non-JSON body")
            raise TransportError(response.text, response.status_code, endpoint, method)

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Pull Mailchimp's human-readable error text out of a failed response"""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"

        if isinstance(body, dict):
            return body.get("detail") or body.get("title") or response.text
        return response.text


def extract_list_field(body: Any, field: str) -> list:
    """
    Return body[field] when it is a list.

    Raises:
        DataFormatError: carrying the whole body when the field is missing
            or is not a list
    """
    items = body.get(field) if isinstance(body, dict) else None
    if not isinstance(items, list):
        logger.error(f"❌ Mailchimp response has no '{field}' list")
        raise DataFormatError(f"Expected a '{field}' list in Mailchimp response", body)
    return items
