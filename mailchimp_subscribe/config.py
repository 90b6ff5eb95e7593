#!/usr/bin/env python3
"""
config.py

Central configuration for the Mailchimp audience client.
Every setting can be overridden through the environment or a local .env file.
"""

import os
from dotenv import load_dotenv

load_dotenv(override=True)

# =============================================================================
# 🔐 API CREDENTIALS
# =============================================================================

# Mailchimp API Configuration
MAILCHIMP_API_KEY = os.getenv("MAILCHIMP_API_KEY", "").strip()
MAILCHIMP_LIST_ID = os.getenv("MAILCHIMP_LIST_ID", "").strip()


def get_mailchimp_datacenter(api_key: str = None) -> str:
    """
    Extract datacenter from Mailchimp API key.

    Mailchimp API keys are formatted as: <key>-<datacenter>
    Falls back to the MAILCHIMP_DC environment variable when the key
    carries no datacenter suffix.
    """
    if api_key is None:
        api_key = MAILCHIMP_API_KEY

    if api_key and '-' in api_key:
        return api_key.split('-')[-1].strip()

    return os.getenv("MAILCHIMP_DC", "").strip()


# =============================================================================
# ⚙️ REQUEST PARAMETERS
# =============================================================================

MAX_RETRIES = int(os.getenv("MAX_RETRIES", 3))              # network-level retry attempts
RETRY_DELAY = float(os.getenv("RETRY_DELAY", 2))            # seconds between retries
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", 30))   # seconds per HTTP call
MAX_WORKERS = int(os.getenv("MAX_WORKERS", 8))              # parallel calls per fan-out
PAGE_COUNT = int(os.getenv("PAGE_COUNT", 1000))             # Mailchimp max page size

# =============================================================================
# 📋 MEMBER DEFAULTS
# =============================================================================

# Status given to brand-new members when the caller passes none
DEFAULT_STATUS_IF_NEW = os.getenv("DEFAULT_STATUS_IF_NEW", "subscribed")

# =============================================================================
# 🗂️ LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")
