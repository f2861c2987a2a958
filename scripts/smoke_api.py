#!/usr/bin/env python3
"""Smoke check for a running availability API."""

from __future__ import annotations

import argparse

import httpx
from httpx import ConnectError


def main() -> None:
    parser = argparse.ArgumentParser(description="Call the availability endpoints of a running server")
    parser.add_argument("--base-url", default="http://127.0.0.1:8001/api/v1")
    parser.add_argument("--service", default="svc-1")
    parser.add_argument("--date", required=True, help="YYYY-MM-DD")
    parser.add_argument("--tenant", default=None)
    args = parser.parse_args()

    params = {"service_id": args.service, "date": args.date}
    if args.tenant:
        params["tenant_id"] = args.tenant

    try:
        internal = httpx.get(f"{args.base_url}/availability/slots", params=params, timeout=10.0)
        public = httpx.post(f"{args.base_url}/public/availability/slots", json=params, timeout=10.0)
        month = httpx.get(
            f"{args.base_url}/availability/month",
            params={**{k: v for k, v in params.items() if k != "date"}, "month": args.date[:7]},
            timeout=10.0,
        )
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn app.main:app --reload --port 8001")
        return

    for label, resp in (("internal", internal), ("public", public), ("month", month)):
        print(f"[{label}] {resp.status_code}")
        if resp.text:
            print(resp.text)


if __name__ == "__main__":
    main()
