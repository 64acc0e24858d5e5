import os
from typing import Any, Dict, Optional

import requests

API_URL = os.getenv("API_URL", "http://localhost:8000")
TIMEOUT = 10


def _friendly_message(default: str, resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return default
    if isinstance(data, dict):
        return data.get("message") or data.get("detail") or default
    return default


def _handle(resp: requests.Response) -> Any:
    if resp.ok:
        return resp.json() if resp.content else None
    raise RuntimeError(_friendly_message("Request failed", resp))


def get(path: str, params: Optional[Dict[str, Any]] = None) -> Any:
    return _handle(requests.get(f"{API_URL}{path}", params=params, timeout=TIMEOUT))


def get_bytes(path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
    resp = requests.get(f"{API_URL}{path}", params=params, timeout=TIMEOUT * 2)
    if resp.ok:
        return resp.content
    raise RuntimeError(_friendly_message("Download failed", resp))


def post(path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
    return _handle(requests.post(f"{API_URL}{path}", json=payload, timeout=TIMEOUT))


def patch(path: str, payload: Dict[str, Any]) -> Any:
    return _handle(requests.patch(f"{API_URL}{path}", json=payload, timeout=TIMEOUT))


def delete(path: str) -> None:
    _handle(requests.delete(f"{API_URL}{path}", timeout=TIMEOUT))
