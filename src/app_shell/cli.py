import argparse
import json
import logging
import sys
from pathlib import Path

from src.adapters.community_lookup import InMemoryCommunityLookup
from src.api.routes.router_decide import request_fields_from_url
from src.components.marketplace_router import run_for_host
from src.rules.loader import load_rules
from src.rules.models import RouterRules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"


def get_rules(path: str) -> RouterRules:
    try:
        return load_rules(Path(path))
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)


def handle_decide(rules: RouterRules, args: argparse.Namespace) -> int:
    try:
        fields = request_fields_from_url(args.url, args.via)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    result = run_for_host(
        fields,
        lookup=InMemoryCommunityLookup.from_rules(rules),
        paths=rules.paths_dict(),
        configs=rules.configs(),
    )
    if not result.success:
        for error in result.errors:
            logger.error("%s: %s", error.field, error.message)
        return 2

    if result.target is None:
        print(json.dumps({"redirect": False}))
    else:
        print(json.dumps({"redirect": True, **result.target.to_dict()}))
    return 0


def handle_check_rules(rules: RouterRules, args: argparse.Namespace) -> int:
    print(
        f"Rules OK: app_domain={rules.app_domain}, "
        f"always_use_ssl={rules.always_use_ssl}, "
        f"communities={len(rules.communities)}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Marketplace Router CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to the rules file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # decide
    decide_parser = subparsers.add_parser("decide", help="Show the redirect decision for a URL")
    decide_parser.add_argument("url", help="Absolute URL, e.g. http://www.acme.sharetribe.com/")
    decide_parser.add_argument("--via", help="Value of the Via header")

    # check-rules
    subparsers.add_parser("check-rules", help="Validate the rules file")

    args = parser.parse_args(argv)

    rules = get_rules(args.rules)

    if args.command == "decide":
        return handle_decide(rules, args)
    elif args.command == "check-rules":
        return handle_check_rules(rules, args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
