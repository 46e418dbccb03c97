from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests.exceptions import ConnectionError, ConnectTimeout
from urllib3.exceptions import NewConnectionError


def _never_sent(err: ConnectionError) -> bool:
    """True when the connection failed before any bytes of the request went out."""
    if isinstance(err, ConnectTimeout):
        return True
    reason = err.args[0] if err.args else None
    # requests wraps urllib3's MaxRetryError, which carries the original error
    reason = getattr(reason, "reason", reason)
    return isinstance(reason, NewConnectionError)


@dataclass
class HTTPClient:
    user_agent: str
    timeout_s: int = 25
    tries: int = 3
    backoff_s: float = 0.8

    def __post_init__(self) -> None:
        self.s = requests.Session()
        self.s.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json, text/plain;q=0.9, */*;q=0.8",
            }
        )

    def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        timeout_s: Optional[int] = None,
    ) -> requests.Response:
        """
        POST ``payload`` as JSON.

        POSTs are not idempotent: only failures to connect are retried.  A
        read timeout or a dropped connection after sending propagates, since
        the server may already have acted on the request.
        """
        timeout = timeout_s if timeout_s is not None else self.timeout_s
        last_err: Optional[Exception] = None
        for attempt in range(self.tries):
            try:
                return self.s.post(url, json=payload, headers=headers, timeout=timeout)
            except ConnectionError as e:
                if not _never_sent(e):
                    raise
                last_err = e
                if attempt < self.tries - 1:
                    time.sleep(self.backoff_s * (2**attempt))
        raise last_err if last_err else RuntimeError("HTTP post_json failed")
