"""Command-line front end for the proposal form controller."""
from __future__ import annotations
import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

from kiss_proposal.client.form_controller import DEFAULT_ENDPOINT_URL, ProposalFormController
from kiss_proposal.client.usage import DEFAULT_DAILY_LIMIT, DEFAULT_USAGE_FILE, UsageStore
from kiss_proposal.common.logging_setup import setup_logging

LOGGER = logging.getLogger("kiss_proposal.client.cli")


def read_description(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    return sys.stdin.read()


def main(argv: list[str] | None = None) -> int:
    setup_logging(os.getenv("LOG_LEVEL", "WARNING").upper())
    ap = argparse.ArgumentParser(description="Generate a KISS proposal for a job post")
    src = ap.add_mutually_exclusive_group()
    src.add_argument("--text", help="Job description text")
    src.add_argument("--file", help="Read the job description from a file (default: stdin)")
    ap.add_argument("--endpoint", default=DEFAULT_ENDPOINT_URL, help="Generation endpoint URL")
    ap.add_argument("--usage-file", default=os.getenv("KISS_USAGE_FILE", str(DEFAULT_USAGE_FILE)))
    ap.add_argument("--daily-limit", type=int, default=DEFAULT_DAILY_LIMIT)
    ap.add_argument("--copy", action="store_true", help="Copy the proposal to the clipboard")
    args = ap.parse_args(argv)

    usage = UsageStore(args.usage_file, daily_limit=args.daily_limit)
    with ProposalFormController(usage, endpoint_url=args.endpoint) as form:
        form.description = read_description(args)
        ok = form.submit()
    if not ok:
        print(form.error, file=sys.stderr)
        return 1

    if form.special_instructions:
        print("Special instructions detected & followed:")
        for instruction in form.special_instructions:
            print(f"  - {instruction}")
        print()
    print(form.proposal)

    if args.copy:
        try:
            form.copy_to_clipboard()
            print("\nCopied!", file=sys.stderr)
        except (OSError, subprocess.CalledProcessError) as e:
            LOGGER.warning("Clipboard copy failed: %s", e)
            print("\nCould not copy to the clipboard.", file=sys.stderr)
    LOGGER.info("Used %s/%s proposals today", usage.counter.count, usage.daily_limit)
    print(f"\n{usage.remaining} of {usage.daily_limit} proposals left today.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
