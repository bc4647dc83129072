# posture_scanner/cli.py
import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .config import FetchConfig, LOG_LEVEL
from .models import AnyFinding, Severity
from .scan_core import available_scans, run_selected_scans


def exit_code(findings: List[AnyFinding]) -> int:
    severities = {f.severity for f in findings}
    if Severity.ERROR in severities:
        return 2
    if severities & {Severity.WARNING, Severity.CRITICAL}:
        return 1
    return 0


def print_finding(f: AnyFinding) -> None:
    print(f"[{f.severity.value.upper()}] {f.status} ({f.check})")
    print(f"  {f.message}")
    if f.check == "cookies":
        for issue in f.issues:
            print(f"  - {issue.name}: {', '.join(issue.issues)}")
    else:
        for issue in f.details.issues:
            print(f"  - {issue}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cookie and HSTS posture scanner")
    parser.add_argument("domain", help="Target domain or URL")
    names = available_scans()
    parser.add_argument("--check", action="append", dest="checks", metavar="NAME", choices=names,
                        help=f"Check to run, repeatable (available: {', '.join(names)})")
    parser.add_argument("--json", action="store_true", help="Output JSON only")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--max-redirects", type=int, help="Maximum redirects to follow")
    parser.add_argument("--user-agent", help="User-Agent header to send")
    parser.add_argument("--insecure", action="store_true", help="Do not verify TLS certificates")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    config = FetchConfig.from_env()
    overrides = {}
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.max_redirects is not None:
        overrides["max_redirects"] = args.max_redirects
    if args.user_agent:
        overrides["user_agent"] = args.user_agent
    if args.insecure:
        overrides["verify_tls"] = False
    config = replace(config, **overrides)

    findings = asyncio.run(run_selected_scans(args.domain, args.checks, config=config))

    if args.json:
        print(json.dumps([f.model_dump(mode="json") for f in findings], indent=2))
    else:
        print(f"Posture scan for {args.domain}\n")
        for f in findings:
            print_finding(f)
    return exit_code(findings)


if __name__ == "__main__":
    sys.exit(main())
