import argparse
import json
import sys
from typing import Any, Optional

import httpx


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=True))
    sys.stdout.write("\n")


def _get(base_url: str, path: str) -> int:
    try:
        resp = httpx.get(f"{base_url}{path}", timeout=5)
        resp.raise_for_status()
        _print_json(resp.json())
        return 0
    except Exception as exc:
        _print_json({"status": "error", "error": str(exc)})
        return 1


def health(base_url: str) -> int:
    return _get(base_url, "/health")


def show_policy(base_url: str) -> int:
    return _get(base_url, "/v1/policy")


def check(base_url: str, url: str, explain: bool = False, policy: Optional[dict] = None) -> int:
    endpoint = "/v1/explain" if explain else "/v1/decide"
    payload: dict = {"url": url}
    if policy is not None:
        payload["policy"] = policy
    try:
        resp = httpx.post(f"{base_url}{endpoint}", json=payload, timeout=10)
        resp.raise_for_status()
        _print_json(resp.json())
        return 0
    except Exception as exc:
        _print_json({"status": "error", "error": str(exc)})
        return 1


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="gatectl")
    parser.add_argument(
        "--base-url",
        default="http://127.0.0.1:7600",
        help="Base URL for the sitegate service",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check service health")
    subparsers.add_parser("policy", help="Show the configured policy")
    check_parser = subparsers.add_parser("check", help="Decide whether a URL is blocked")
    check_parser.add_argument("url", help="URL to check")
    check_parser.add_argument(
        "--explain", action="store_true", help="Report every matching rule"
    )
    check_parser.add_argument("--policy", help="Inline JSON policy overriding the configured one")

    args = parser.parse_args(argv)

    if args.command == "health":
        raise SystemExit(health(args.base_url))
    if args.command == "policy":
        raise SystemExit(show_policy(args.base_url))
    if args.command == "check":
        policy = None
        if args.policy:
            try:
                policy = json.loads(args.policy)
            except Exception as exc:
                _print_json({"status": "error", "error": f"Invalid JSON: {exc}"})
                raise SystemExit(1)
        raise SystemExit(check(args.base_url, args.url, explain=args.explain, policy=policy))


if __name__ == "__main__":
    main()
