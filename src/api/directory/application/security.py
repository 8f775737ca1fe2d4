"""Secret generation for issued API keys."""

import secrets

API_KEY_PREFIX = "botno_"


def generate_api_key_secret() -> str:
    """Generate a URL-safe API key with the botno_ prefix.

    Generates 32 bytes of cryptographically secure random data and encodes
    it as URL-safe base64. The prefix makes keys easy to spot in secret
    scanners and logs.

    Returns:
        A URL-safe API key string (e.g., botno_abc123...)
    """
    # replace - with _ so a double click selects the whole key
    random_part = secrets.token_urlsafe(32).replace("-", "_")
    return f"{API_KEY_PREFIX}{random_part}"
