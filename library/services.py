import logging

import requests
from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

# Create a session for connection pooling (reuses TCP connections)
_session = requests.Session()


def fetch_demo_payload():
    """
    Calls the remote demo endpoint with caching to reduce latency.
    Returns the decoded JSON body, or None when the call fails.
    """
    url = settings.LIBRARY_HTTP_DEMO_URL
    cache_key = f"http_client_demo:{url}"

    cached_result = cache.get(cache_key)
    if cached_result is not None:
        return cached_result

    try:
        response = _session.get(url, timeout=5)
    except requests.exceptions.Timeout:
        logger.warning("Timed out calling %s", url)
        return None
    except requests.exceptions.RequestException as e:
        logger.warning("Could not call %s: %s", url, e)
        return None

    if response.status_code != 200:
        logger.warning("Unexpected status %s from %s", response.status_code, url)
        return None

    try:
        result = response.json()
    except ValueError:
        logger.warning("Response from %s is not JSON", url)
        return None

    cache.set(cache_key, result, settings.LIBRARY_HTTP_DEMO_CACHE_SECONDS)
    return result
