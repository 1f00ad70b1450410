#!/usr/bin/env python3
"""
Deployment Smoke Validation Script

Validates a running gateway from the outside:
1. Liveness (GET / and /health/live)
2. CORS (preflight from an admitted origin, rejection of a foreign one)
3. Chat round trip (POST /api/chat)

Usage:
    python scripts/validate_deployment.py --url http://localhost:10000
    python scripts/validate_deployment.py --url https://api.example.com --origin https://finovatools.com
"""

import argparse
import sys
from enum import Enum
from typing import List

import requests


class ValidationPhase(Enum):
    """Validation phases."""
    HEALTH = "health"
    CORS = "cors"
    CHAT = "chat"


class ValidationResult:
    """Single validation result."""

    def __init__(self, phase: ValidationPhase, name: str, passed: bool, details: str = ""):
        self.phase = phase
        self.name = name
        self.passed = passed
        self.details = details

    def __str__(self) -> str:
        status = "✓ PASS" if self.passed else "✗ FAIL"
        result = f"{status}: {self.phase.value.upper()} - {self.name}"
        if self.details:
            result += f"\n  {self.details}"
        return result


class Validator:
    """Chat gateway deployment validator."""

    def __init__(self, base_url: str, origin: str, foreign_origin: str, timeout: float = 60.0):
        self.base_url = base_url.rstrip("/")
        self.origin = origin
        self.foreign_origin = foreign_origin
        self.timeout = timeout
        self.results: List[ValidationResult] = []

    def run(self) -> bool:
        """Run all validations. Returns True if all passed."""
        print(f"\n{'='*70}")
        print(f"Chat Gateway Deployment Validation - {self.base_url}")
        print(f"{'='*70}\n")

        self._validate_health()
        self._validate_cors()
        self._validate_chat()

        self._print_summary()
        return all(r.passed for r in self.results)

    def _record(self, phase: ValidationPhase, name: str, passed: bool, details: str = "") -> None:
        self.results.append(ValidationResult(phase, name, passed, details))

    def _validate_health(self) -> None:
        for path in ("/", "/health/live"):
            try:
                resp = requests.get(f"{self.base_url}{path}", timeout=self.timeout)
                self._record(
                    ValidationPhase.HEALTH, f"GET {path}",
                    resp.status_code == 200, f"status={resp.status_code}"
                )
            except requests.RequestException as e:
                self._record(ValidationPhase.HEALTH, f"GET {path}", False, str(e))

    def _validate_cors(self) -> None:
        preflight_headers = {
            "Origin": self.origin,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        }
        try:
            resp = requests.options(
                f"{self.base_url}/api/chat", headers=preflight_headers, timeout=self.timeout
            )
            allowed = resp.headers.get("access-control-allow-origin")
            self._record(
                ValidationPhase.CORS, "Preflight from admitted origin",
                resp.status_code == 200 and allowed == self.origin,
                f"status={resp.status_code} allow-origin={allowed}"
            )
        except requests.RequestException as e:
            self._record(ValidationPhase.CORS, "Preflight from admitted origin", False, str(e))

        try:
            resp = requests.get(
                f"{self.base_url}/", headers={"Origin": self.foreign_origin}, timeout=self.timeout
            )
            self._record(
                ValidationPhase.CORS, "Foreign origin rejected",
                resp.status_code == 403, f"status={resp.status_code}"
            )
        except requests.RequestException as e:
            self._record(ValidationPhase.CORS, "Foreign origin rejected", False, str(e))

    def _validate_chat(self) -> None:
        payload = {"message": "How does prepayment help?", "context": "prepayment"}
        try:
            resp = requests.post(
                f"{self.base_url}/api/chat",
                json=payload,
                headers={"Origin": self.origin},
                timeout=self.timeout,
            )
            reply = resp.json().get("reply", "")
            self._record(
                ValidationPhase.CHAT, "Chat round trip",
                resp.status_code == 200 and bool(reply),
                f"status={resp.status_code} reply_length={len(reply)}"
            )
        except (requests.RequestException, ValueError) as e:
            self._record(ValidationPhase.CHAT, "Chat round trip", False, str(e))

    def _print_summary(self) -> None:
        for result in self.results:
            print(result)
        passed = sum(1 for r in self.results if r.passed)
        print(f"\n{passed}/{len(self.results)} checks passed")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Validate a running chat gateway")
    parser.add_argument("--url", default="http://localhost:10000", help="Gateway base URL")
    parser.add_argument("--origin", default="http://localhost:5500", help="An admitted origin")
    parser.add_argument("--foreign-origin", default="https://evil.example", help="A rejected origin")
    parser.add_argument("--timeout", type=float, default=60.0, help="Per-request timeout (s)")

    args = parser.parse_args()
    ok = Validator(args.url, args.origin, args.foreign_origin, timeout=args.timeout).run()
    sys.exit(0 if ok else 1)
