import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .errors import CatalogUnavailable, ExportFailed
from .export import export_card
from .models import ScenarioMetadata
from .narrative import build_filing_paragraph, build_full_card, build_narrative
from .rules import RuleEngine

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "typologies", "typologies.yaml"
)

EXIT_BLANK_SCENARIO = 2
EXIT_CATALOG_UNAVAILABLE = 3
EXIT_EXPORT_FAILED = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typology-assist",
        description="Match a scenario against the typology catalog and draft the advisory card.",
    )
    parser.add_argument("scenario", nargs="?", help="Scenario text (read from stdin when omitted).")
    parser.add_argument("--catalog", default=os.getenv("TYPOLOGIES_PATH", DEFAULT_CATALOG))
    parser.add_argument("--country", default="GLOBAL")
    parser.add_argument("--domain", default="")
    parser.add_argument("--product", default="")
    parser.add_argument("--customer-type", default="")
    parser.add_argument("--amount-band", default="")
    parser.add_argument("--volume-band", default="")
    parser.add_argument("--cross-border", choices=("Yes", "No"), default="No")
    parser.add_argument("--format", choices=("card", "json"), default="card")
    parser.add_argument("--output", help="Write the full card to this file instead of stdout.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    scenario = args.scenario if args.scenario is not None else sys.stdin.read()
    if not scenario.strip():
        print("Please enter a brief scenario description.", file=sys.stderr)
        return EXIT_BLANK_SCENARIO

    try:
        engine = RuleEngine.from_path(args.catalog)
    except CatalogUnavailable as e:
        print(str(e), file=sys.stderr)
        return EXIT_CATALOG_UNAVAILABLE

    meta = ScenarioMetadata(
        country=args.country,
        domain=args.domain,
        product=args.product,
        customer_type=args.customer_type,
        amount_band=args.amount_band,
        volume_band=args.volume_band,
        cross_border=args.cross_border,
    )
    result = engine.analyse(meta, scenario.strip())

    if args.output:
        try:
            export_card(result, args.output)
        except ExportFailed as e:
            print(str(e), file=sys.stderr)
            return EXIT_EXPORT_FAILED
        return 0

    if args.format == "json":
        payload = {
            "result": result.model_dump(mode="json", by_alias=True),
            "narrative": build_narrative(result),
            "filing_paragraph": build_filing_paragraph(result),
        }
        print(json.dumps(payload, indent=2))
    else:
        print(build_full_card(result), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
