#!/usr/bin/env python3
"""
Smoke test of the retrieval tools against the configured corpus.

Run (needs embedding + judge credentials in .env):
  python scripts/smoke_retrieval.py

Options:
  --cases            JSON file with cases (same shape as TESTS below)
  --print-results    Print every returned item
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from recall.config.settings import settings
from recall.container import configure_container, container
from recall.core.services.tool_service import RetrievalTools

TESTS = [
    {
        "tool": "search",
        "args": {
            "keywords": ["house", "address"],
            "search_query": "Which house did I buy? What is its address?",
            "limit": 5,
        },
        "expect_any": ["Victoria Grove", "Chorlton"],
    },
    {
        "tool": "search",
        "args": {"keywords": ["invoice"], "search_query": "payment reminder", "limit": 5},
        "expect_any": ["invoice", "payment"],
    },
    {
        "tool": "filter",
        "args": {"contains": "invoice", "limit": 3},
        "expect_any": ["invoice"],
    },
]


def normalize(text: str) -> str:
    return (text or "").lower()


def items_text(result: dict) -> str:
    parts = []
    for items in result.values():
        for item in items:
            parts.extend(str(v) for v in item.values() if isinstance(v, str))
    return "\n".join(parts)


def check_expectations(text: str, test: dict) -> list[str]:
    errors = []
    haystack = normalize(text)

    expect_any = test.get("expect_any") or []
    expect_none = test.get("expect_none") or []

    if expect_any:
        if not any(normalize(x) in haystack for x in expect_any):
            errors.append(f"missing any of: {expect_any}")

    for token in expect_none:
        if normalize(token) in haystack:
            errors.append(f"should not contain: {token}")

    return errors


async def run(tests: list[dict], print_results: bool) -> int:
    tools = container.resolve(RetrievalTools)
    failures = 0

    for idx, test in enumerate(tests, start=1):
        print(f"\nT{idx}: {test['tool']} {test['args']}")
        result = await tools.call(test["tool"], test["args"])
        if not result.ok:
            failures += 1
            print("FAIL:", result.error)
            continue

        if print_results:
            print(json.dumps(result.result, indent=2, ensure_ascii=False))

        errors = check_expectations(items_text(result.result), test)
        if errors:
            failures += 1
            print("FAIL:", "; ".join(errors))
        else:
            print("OK")

    return failures


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--cases", type=Path)
    parser.add_argument("--print-results", action="store_true")
    args = parser.parse_args()

    tests = json.loads(args.cases.read_text(encoding="utf-8")) if args.cases else TESTS

    configure_container(settings)
    failures = asyncio.run(run(tests, args.print_results))

    if failures:
        print(f"\nFAILED: {failures} test(s) failed")
        sys.exit(1)
    print("\nALL OK")
    return 0


if __name__ == "__main__":
    main()
