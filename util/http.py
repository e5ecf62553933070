"""
util/http.py

Tiny HTTP helpers for JSON requests.
- Timeout can be configured via HTTP_TIMEOUT env (default 8s)
- Raises for HTTP status errors; network errors bubble after `retries` attempts
- Retries default to 0: paginated place searches are not safe to repeat
"""

import logging
import os
import time

import requests


logger = logging.getLogger(__name__)


def _env_timeout():
    try:
        return float(os.getenv("HTTP_TIMEOUT", "8"))
    except ValueError:
        return 8.0


def get_json(url, params=None, headers=None, timeout=None, retries=0):
    """HTTP GET JSON with simple retry."""
    return send_json("GET", url, params=params, headers=headers, timeout=timeout, retries=retries)


def send_json(method, url, params=None, json=None, headers=None, timeout=None, retries=0):
    """Send a request and decode the JSON body (None for empty bodies)."""
    if timeout is None:
        timeout = _env_timeout()

    for attempt in range(retries + 1):
        try:
            resp = requests.request(method, url, params=params, json=json, headers=headers, timeout=timeout)
            resp.raise_for_status()
            if not resp.content:
                return None
            return resp.json()
        except requests.RequestException as exc:  # bubble after retries
            if attempt < retries:
                logger.info("%s %s failed (%s); retrying", method, url, exc)
                time.sleep(0.35 * (attempt + 1))
                continue
            raise
    raise RuntimeError("send_json: unreachable")
