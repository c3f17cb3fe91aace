# api/utils/http_retry.py
"""
HTTP GET with retry for rate limits and transient errors.

Used by the import scripts to download source data (lexicon files,
Bible text) from public mirrors.

Usage:
    from utils.http_retry import get_with_retry

    response = get_with_retry(LEXICON_SOURCE_URL, timeout=60)
    text = response.text
"""

import logging
import time
import requests
from typing import Optional

logger = logging.getLogger(__name__)


def _backoff(attempt: int, retry_after: Optional[str] = None) -> int:
    if retry_after:
        try:
            return int(retry_after)
        except ValueError:
            pass
    return min(2 ** attempt * 2, 30)


def get_with_retry(
    url: str,
    headers: dict = None,
    params: dict = None,
    timeout: int = 60,
    max_retries: int = 3,
    sleep=time.sleep,
) -> requests.Response:
    """
    GET with automatic retry.

    Retry behavior:
    - 429 (rate limit): Respects Retry-After header, else exponential backoff
    - 5xx (server error): Exponential backoff
    - Connection errors: Exponential backoff
    - 4xx (client error): No retry
    - Timeout: No retry

    Args:
        url: Resource URL
        headers: HTTP headers
        params: Query parameters
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts
        sleep: Wait function (tests pass a no-op)

    Returns:
        requests.Response on success

    Raises:
        RuntimeError: On timeout, client errors, or exhausted retries
    """
    last_status = None

    for attempt in range(max_retries):
        try:
            response = requests.get(url, headers=headers, params=params, timeout=timeout)
        except requests.ConnectionError as e:
            if attempt < max_retries - 1:
                wait = 2 ** attempt
                logger.warning(f"Connection error to {url}, retrying in {wait}s: {e}")
                sleep(wait)
                continue
            raise RuntimeError(
                f"Connection to {url} failed after {max_retries} attempts: {e}"
            ) from e
        except requests.Timeout as e:
            raise RuntimeError(f"Request to {url} timed out after {timeout}s") from e

        last_status = response.status_code

        if response.status_code == 429:
            wait = _backoff(attempt, response.headers.get("retry-after"))
            logger.info(
                f"Rate limited by {url}, waiting {wait}s "
                f"(attempt {attempt + 1}/{max_retries})"
            )
            sleep(wait)
            continue

        if response.status_code >= 500:
            wait = 2 ** attempt
            logger.warning(
                f"Server error {response.status_code} from {url}, "
                f"retrying in {wait}s (attempt {attempt + 1}/{max_retries})"
            )
            sleep(wait)
            continue

        if response.status_code >= 400:
            raise RuntimeError(f"HTTP {response.status_code} from {url}")

        return response

    raise RuntimeError(
        f"Request to {url} failed after {max_retries} retries "
        f"(last status: {last_status or 'unknown'})"
    )
