"""Command-line front end for the dashboard workflows.

Examples:
- naya-daur personas --product "E-Scooters" --location Mumbai
- naya-daur market --company Acme --location Delhi --product "Electric bikes"
- naya-daur campaign --company Acme --website acme.in --country India --city Pune
- naya-daur config

The API key comes from ``--api-key`` or ``GEMINI_API_KEY`` and is only held
in memory. Results are printed as JSON on stdout; progress goes to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING, Any

from naya_daur.client import GroundedJSONRetriever, ImageGenerator
from naya_daur.config import print_config_audit, resolve_config
from naya_daur.constants import MAX_IMAGE_SAMPLE_COUNT
from naya_daur.dashboard import (
    CampaignInputs,
    MarketInputs,
    analyze_market_position,
    forge_campaign,
    generate_personas,
)
from naya_daur.exceptions import NayaDaurError
from naya_daur.telemetry import SimpleReporter, TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from naya_daur.config import ResolvedConfig

log = logging.getLogger("naya_daur.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="naya-daur",
        description="Grounded marketing insights from the Gemini API",
    )
    parser.add_argument("--api-key", default=None, help="Overrides GEMINI_API_KEY")
    parser.add_argument("--model", default=None, help="Text generation model")
    parser.add_argument(
        "--env-file", type=Path, default=None, help="Optional .env file to read"
    )
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Print a timing and retry report to stderr when done",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    personas = sub.add_parser("personas", help="Persona Architect")
    personas.add_argument("--product", required=True)
    personas.add_argument("--location", required=True)

    market = sub.add_parser("market", help="Market Position Analyzer")
    market.add_argument("--company", required=True)
    market.add_argument("--website", default="")
    market.add_argument("--location", required=True)
    market.add_argument("--product", required=True)
    market.add_argument("--competitors", default="")

    campaign = sub.add_parser("campaign", help="Campaign Forge strategy")
    campaign.add_argument("--company", required=True)
    campaign.add_argument("--website", default="")
    campaign.add_argument("--country", required=True)
    campaign.add_argument("--city", required=True)
    campaign.add_argument("--image-url", default="")

    images = sub.add_parser("images", help="Generate images for a prompt")
    images.add_argument("--prompt", required=True)
    images.add_argument(
        "--samples",
        type=int,
        choices=range(1, MAX_IMAGE_SAMPLE_COUNT + 1),
        default=None,
        help="Images to generate (defaults to GEMINI_IMAGE_SAMPLE_COUNT)",
    )

    sub.add_parser("config", help="Show the resolved configuration (redacted)")
    return parser


def _progress(message: str) -> None:
    print(message, file=sys.stderr)  # noqa: T201


async def run_command(
    args: argparse.Namespace, config: ResolvedConfig, telemetry: Any
) -> Any:
    """Run one workflow command and return a JSON-serializable result."""
    api_key = args.api_key or config.api_key
    frozen = config.to_frozen()

    if args.command == "images":
        generator = ImageGenerator(api_key, config=frozen, telemetry=telemetry)
        return await generator.generate(args.prompt, args.samples)

    retriever = GroundedJSONRetriever(api_key, config=frozen, telemetry=telemetry)
    if args.command == "personas":
        result = await generate_personas(
            retriever, args.product, args.location, _progress
        )
    elif args.command == "market":
        market_inputs = MarketInputs(
            company_name=args.company,
            website=args.website,
            location=args.location,
            product=args.product,
            competitors=args.competitors,
        )
        result = await analyze_market_position(retriever, market_inputs, _progress)
    elif args.command == "campaign":
        campaign_inputs = CampaignInputs(
            company_name=args.company,
            website=args.website,
            country=args.country,
            city=args.city,
            image_url=args.image_url,
        )
        result = await forge_campaign(retriever, campaign_inputs, _progress)
    else:
        raise ValueError(f"Unknown command: {args.command}")
    return result.to_wire()


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        overrides = {"model": args.model} if args.model else None
        config = resolve_config(overrides, use_env_file=args.env_file)

        if args.command == "config":
            print(print_config_audit(config))  # noqa: T201
            return 0

        reporter = SimpleReporter() if args.telemetry else None
        telemetry = (
            TelemetryContext(reporter, enabled=True) if reporter is not None else None
        )
        result = asyncio.run(run_command(args, config, telemetry))
    except NayaDaurError as e:
        log.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)  # noqa: T201
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))  # noqa: T201
    if reporter is not None:
        print(reporter.get_report(), file=sys.stderr)  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
