#!/usr/bin/env python3
"""Health check for the Zawadii loyalty counters.

Usage:
    python apps/api/tooling/check_observability.py \
        --base-url https://staging-api.example.com \
        --api-key "$OPERATOR_API_KEY"

The script fails when SMS dispatch failures or rejected duplicate purchases
exceed the configured thresholds.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Dict, Optional

import httpx


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Zawadii observability checker")
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="Base URL of the Zawadii API service.",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="Operator API key sent as X-API-Key.",
    )
    parser.add_argument(
        "--max-sms-failures",
        type=int,
        default=0,
        help="Maximum allowed failed SMS dispatches before failing (default: 0).",
    )
    parser.add_argument(
        "--max-duplicate-rejections",
        type=int,
        default=10,
        help="Maximum allowed rejected duplicate purchases before failing (default: 10).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="HTTP request timeout in seconds.",
    )
    return parser.parse_args()


async def _get_json(
    client: httpx.AsyncClient,
    path: str,
    *,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    response = await client.get(path, headers=headers)
    response.raise_for_status()
    return response.json()


def _fail(message: str) -> None:
    print(f"[check-observability] ❌ {message}")
    sys.exit(1)


def _log_ok(message: str) -> None:
    print(f"[check-observability] ✅ {message}")


async def validate_health(client: httpx.AsyncClient) -> None:
    payload = await _get_json(client, "/healthz")
    if payload.get("status") != "ok":
        _fail(f"Health endpoint reported {payload.get('status')!r}")
    _log_ok(f"API healthy (environment={payload.get('environment')}, version={payload.get('version')})")


async def validate_loyalty(
    client: httpx.AsyncClient,
    api_key: Optional[str],
    max_sms_failures: int,
    max_duplicate_rejections: int,
) -> None:
    headers = {"X-API-Key": api_key} if api_key else None
    payload = await _get_json(client, "/api/v1/observability/loyalty", headers=headers)

    activities = payload.get("activities", {}) or {}
    messaging = payload.get("messaging", {}) or {}
    rewards = payload.get("rewards", {}) or {}

    sms_failures = int(messaging.get("failed", 0))
    duplicates = int(activities.get("duplicates_rejected", 0))

    if sms_failures > max_sms_failures:
        _fail(f"SMS failures {sms_failures} exceed threshold {max_sms_failures}")
    if duplicates > max_duplicate_rejections:
        _fail(f"Rejected duplicate purchases {duplicates} exceed threshold {max_duplicate_rejections}")

    _log_ok(
        f"Loyalty observability OK (recorded={activities.get('recorded', 0)}, "
        f"sms_sent={messaging.get('sent', 0)}, sms_failed={sms_failures}, "
        f"codes_generated={rewards.get('codes_generated', 0)})"
    )


async def main() -> None:
    args = parse_args()

    async with httpx.AsyncClient(base_url=args.base_url, timeout=args.timeout) as client:
        await validate_health(client)
        await validate_loyalty(
            client,
            api_key=args.api_key,
            max_sms_failures=args.max_sms_failures,
            max_duplicate_rejections=args.max_duplicate_rejections,
        )

    _log_ok("Observability checks completed successfully")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except httpx.HTTPStatusError as exc:
        _fail(f"HTTP {exc.response.status_code} while calling {exc.request.url}")
    except httpx.HTTPError as exc:
        _fail(f"Request failed: {exc}")
