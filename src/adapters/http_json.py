"""Blocking JSON POST helper shared by the webhook-style notifiers."""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request

from core.errors import NotifySendError


def post_json(url: str, payload: dict, timeout: float = 10.0, label: str = "Webhook") -> None:
    """POST payload as JSON; raise NotifySendError on any delivery failure."""

    data = json.dumps(payload).encode("utf-8")
    # A blocking call is fine here: one message per invocation at most.
    try:
        request = urllib.request.Request(url, data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        with urllib.request.urlopen(request, timeout=timeout):
            pass
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace")
        raise NotifySendError(f"{label} error {e.code}: {body}") from e
    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        raise NotifySendError(f"{label} unreachable: {e}") from e
    except ValueError as e:
        # Malformed endpoint URL (missing scheme, bad host).
        raise NotifySendError(f"{label} invalid endpoint: {e}") from e
