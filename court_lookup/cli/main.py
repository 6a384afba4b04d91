"""Command-line interface for the court case lookup engine."""

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional

from court_lookup.lib.config import Config, LookupSettings
from court_lookup.lib.errors import BrowserLaunchError
from court_lookup.lib.logging_config import get_logger, setup_logging
from court_lookup.models.case import CaseQuery
from court_lookup.models.search_outcome import SearchStatus
from court_lookup.services.captcha_solver import CaptchaSolver
from court_lookup.services.case_lookup_service import CaseLookupService

logger = get_logger()

EXIT_CODES = {
    SearchStatus.SUCCESS: 0,
    SearchStatus.ERROR: 1,
    SearchStatus.CAPTCHA_FAILED: 1,
    SearchStatus.NOT_FOUND: 2,
}


class CourtLookupCLI:
    """Command-line interface for the court case lookup engine."""

    def __init__(self, service_factory: Optional[Callable[[LookupSettings], CaseLookupService]] = None):
        """Initialize the CLI."""
        setup_logging(log_level=Config.get_log_level(), log_file=Config.get_log_file())
        self._service_factory = service_factory or (lambda settings: CaseLookupService(settings=settings))

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="court-lookup",
            description="Court case lookup",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Look up a case and print the outcome as JSON
  court-lookup search FAO 12345 2023

  # Watch the browser while it searches, and keep the result
  court-lookup search "W.P.(C)" 4567 2022 --no-headless --output result.json

  # Check the CAPTCHA solver account balance
  court-lookup captcha-balance

Exit codes: 0 success, 1 error or CAPTCHA failure, 2 case not found.
""",
        )
        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        search_parser = subparsers.add_parser(
            "search",
            help="Look up a single case",
            description="Look up a single case by type, number and filing year.",
        )
        search_parser.add_argument("case_type", help="Case type as listed on the court site (e.g., FAO)")
        search_parser.add_argument("case_number", help="Case number (e.g., 12345)")
        search_parser.add_argument("filing_year", type=int, help="Filing year (e.g., 2023)")
        search_parser.add_argument(
            "--no-headless",
            action="store_true",
            help="Show the browser window instead of running headless",
        )
        search_parser.add_argument(
            "--base-url",
            default=None,
            help="Court site landing page (default: configured base_url)",
        )
        search_parser.add_argument(
            "--output",
            default=None,
            help="Also write the outcome JSON to this file",
        )
        search_parser.add_argument(
            "--no-html",
            action="store_true",
            help="Leave the raw page HTML out of the printed JSON",
        )

        subparsers.add_parser(
            "captcha-balance",
            help="Show the CAPTCHA solver account balance",
        )
        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI and return the process exit code."""
        parser = self.build_parser()
        args = parser.parse_args(argv)

        if args.command == "search":
            return self.run_search(args)
        if args.command == "captcha-balance":
            return self.run_captcha_balance()

        parser.print_help()
        return 1

    def run_search(self, args: argparse.Namespace) -> int:
        settings = Config.load_settings(
            headless=False if args.no_headless else None,
            base_url=args.base_url.rstrip("/") if args.base_url else None,
        )
        try:
            query = CaseQuery(
                case_type=args.case_type,
                case_number=args.case_number,
                filing_year=args.filing_year,
                min_year=settings.min_filing_year,
                max_year=settings.max_filing_year,
            )
        except ValueError as e:
            logger.error(f"Invalid query: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1

        try:
            service = self._service_factory(settings)
            outcome = service.search(query)
        except BrowserLaunchError as e:
            logger.error(f"CLI error: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            print("\nOperation cancelled", file=sys.stderr)
            return 1

        payload = outcome.to_dict(include_html=not args.no_html)
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        print(text)

        if args.output:
            path = Path(args.output)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(outcome.to_dict(), f, indent=2, ensure_ascii=False)
            logger.info(f"Outcome written to {path}")

        return EXIT_CODES[outcome.status]

    def run_captcha_balance(self) -> int:
        solver = CaptchaSolver(Config.load_settings())
        if not solver.is_configured:
            print("Error: CAPTCHA solver API key is not configured", file=sys.stderr)
            return 1
        balance = solver.get_balance()
        if balance is None:
            print("Error: could not read CAPTCHA solver balance", file=sys.stderr)
            return 1
        print(f"{balance:.4f}")
        return 0


def main():
    """Main entry point."""
    cli = CourtLookupCLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
