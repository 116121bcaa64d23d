"""
Credential lookup from the OS keychain or the environment.

Supports:
- Windows: Windows Credential Manager
- macOS: macOS Keychain
- Linux: Secret Service API (GNOME Keyring, KWallet)

Lookups only: the studio never writes credentials anywhere.

Usage:
    from core.secrets import get_api_key

    # Checks keychain first, falls back to env var
    client_id = get_api_key("YOUTUBE_CLIENT_ID")
"""

import os
import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)

# Service name for keychain entries
SERVICE_NAME = "slide-studio"

# Known credential names and their environment variable equivalents
KNOWN_KEYS = {
    "YOUTUBE_CLIENT_ID": "YouTube OAuth2 client id",
    "YOUTUBE_CLIENT_SECRET": "YouTube OAuth2 client secret",
    "YOUTUBE_REFRESH_TOKEN": "YouTube refresh token with youtube.upload scope",
}


def get_api_key(key_name: str, fallback_to_env: bool = True) -> Optional[str]:
    """
    Get a credential, checking keychain first then environment variables.

    Args:
        key_name: Name of the credential (e.g., "YOUTUBE_CLIENT_ID")
        fallback_to_env: If True, check environment variables if not in keychain

    Returns:
        The credential value, or None if not found
    """
    try:
        value = keyring.get_password(SERVICE_NAME, key_name)
        if value:
            logger.debug(f"Retrieved {key_name} from secure keychain")
            return value
    except KeyringError as e:
        logger.debug(f"Keychain access failed for {key_name}: {e}")

    if fallback_to_env:
        value = os.environ.get(key_name)
        if value:
            logger.debug(f"Retrieved {key_name} from environment variable")
            return value

    return None


def list_api_keys() -> dict:
    """
    List all known credentials and where they come from.

    Returns:
        Dict mapping key names to their status:
        - "keychain": stored in secure keychain
        - "env": available in environment variable
        - "not_set": not configured
    """
    status = {}
    for key_name in KNOWN_KEYS:
        try:
            if keyring.get_password(SERVICE_NAME, key_name):
                status[key_name] = "keychain"
                continue
        except KeyringError as e:
            logger.debug(f"Keychain access failed for {key_name}: {e}")

        if os.environ.get(key_name):
            status[key_name] = "env"
        else:
            status[key_name] = "not_set"

    return status
