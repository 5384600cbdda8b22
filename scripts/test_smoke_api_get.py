"""Simple GET smoke test against a running dev server."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Any


BASE_URL = "http://127.0.0.1:5000"


def http_get(url: str) -> tuple[int, str]:
    req = urllib.request.Request(url, method="GET")
    try:
        with urllib.request.urlopen(req, timeout=10) as resp:
            return int(resp.status), resp.read().decode("utf-8")
    except urllib.error.HTTPError as exc:
        return int(exc.code), exc.read().decode("utf-8")


def http_get_json(url: str) -> tuple[int, Any]:
    status, body = http_get(url)
    return status, json.loads(body) if body else {}


def assert_status(status: int, expected: int, url: str) -> None:
    if status != expected:
        raise AssertionError(f"GET {url} expected {expected}, got {status}")


def main() -> int:
    print("Testing GET endpoints:")
    for path in ("/", "/sitemap.xml", "/robots.txt", "/blog", "/guides", "/compare", "/about"):
        status, _ = http_get(f"{BASE_URL}{path}")
        assert_status(status, 200, f"{BASE_URL}{path}")
        print(f"OK: {BASE_URL}{path}")

    status, payload = http_get_json(f"{BASE_URL}/api/entities/emirate")
    assert_status(status, 200, f"{BASE_URL}/api/entities/emirate")
    print(f"OK: {BASE_URL}/api/entities/emirate")

    emirates = payload.get("entities", [])
    if not isinstance(emirates, list) or not emirates:
        print("No emirates available to test page endpoints.")
        return 0
    emirate = str(emirates[0].get("slug") or "")

    status, _ = http_get(f"{BASE_URL}/{emirate}")
    assert_status(status, 200, f"{BASE_URL}/{emirate}")
    print(f"OK: {BASE_URL}/{emirate}")

    status, payload = http_get_json(f"{BASE_URL}/api/entities/vehicle?limit=1")
    assert_status(status, 200, f"{BASE_URL}/api/entities/vehicle")
    vehicles = payload.get("entities", [])
    if vehicles:
        vehicle = str(vehicles[0].get("slug") or "")
        status, _ = http_get(f"{BASE_URL}/{emirate}/{vehicle}")
        assert_status(status, 200, f"{BASE_URL}/{emirate}/{vehicle}")
        print(f"OK: {BASE_URL}/{emirate}/{vehicle}")

        url = f"{BASE_URL}/api/pages/{emirate}/{vehicle}/validation"
        status, _ = http_get_json(url)
        assert_status(status, 200, url)
        print(f"OK: {url}")

    status, _ = http_get_json(f"{BASE_URL}/api/entities/stats")
    assert_status(status, 200, f"{BASE_URL}/api/entities/stats")
    print(f"OK: {BASE_URL}/api/entities/stats")

    status, _ = http_get_json(f"{BASE_URL}/api/entities/search")
    assert_status(status, 400, f"{BASE_URL}/api/entities/search")
    print(f"OK: {BASE_URL}/api/entities/search (400 without q)")

    status, _ = http_get(f"{BASE_URL}/this-page-does-not-exist")
    assert_status(status, 404, f"{BASE_URL}/this-page-does-not-exist")
    print(f"OK: {BASE_URL}/this-page-does-not-exist (404)")

    print("Smoke test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
