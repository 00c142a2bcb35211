import logging
import time

import requests

import config

logger = logging.getLogger(__name__)

MAX_BACKOFF_S = 30


class RiotApiError(Exception):
    pass


def riot_get(url: str, params=None, timeout=20, max_retries=6):
    if not config.API_KEY:
        raise RiotApiError("RIOT_API_KEY is not set")

    headers = {"X-Riot-Token": config.API_KEY}

    for attempt in range(max_retries):
        r = requests.get(url, headers=headers, params=params, timeout=timeout)

        if r.status_code == 200:
            return r.json()

        if r.status_code == 429:
            retry_after = r.headers.get("Retry-After")
            sleep_s = int(retry_after) if retry_after and retry_after.isdigit() else (2 + attempt)
            logger.debug(f"429 for {url}, sleeping {sleep_s}s")
            time.sleep(sleep_s)
            continue

        if r.status_code >= 500:
            sleep_s = min(2 ** attempt, MAX_BACKOFF_S)
            logger.debug(f"HTTP {r.status_code} for {url}, retrying in {sleep_s}s")
            time.sleep(sleep_s)
            continue

        try:
            body = r.json()
        except ValueError:
            body = r.text

        raise RiotApiError(f"HTTP {r.status_code} for {url} params={params} body={body}")

    raise RiotApiError(f"Too many retries for {url}")
