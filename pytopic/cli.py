"""Command line tool for trying topic filters against topics."""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import yaml

from .config import Config, LOG_LEVELS
from .errors import PyTopicError
from .index import Subscription, SubscriptionIndex
from .logger import Logger


DEMO_SUBSCRIPTIONS = [
    Subscription("Subscriber01", "a/b/d"),
    Subscription("Subscriber02", "a/c"),
]
DEMO_TOPICS = ["a/b/d", "a/b", "a/c"]


def read_subscriptions(path: str) -> List[Subscription]:
    """Read subscriptions from a YAML or JSON file.

    Accepts either a list of {"subscriber": ..., "filter": ...} entries or a
    mapping of subscriber to a filter or list of filters.
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or []

    subscriptions = []
    if isinstance(data, dict):
        for subscriber_id, filters in data.items():
            if isinstance(filters, str):
                filters = [filters]
            for topic_filter in filters:
                subscriptions.append(Subscription(subscriber_id, str(topic_filter)))
    elif isinstance(data, list):
        for entry in data:
            if not isinstance(entry, dict) or "subscriber" not in entry or "filter" not in entry:
                raise ValueError(f"Subscription entries need 'subscriber' and 'filter': {entry!r}")
            subscriptions.append(Subscription(entry["subscriber"], str(entry["filter"])))
    else:
        raise ValueError(f"Unsupported subscription file layout in {path}")

    return subscriptions


def format_matches(matches) -> str:
    """Render matches as 'Matches: ( a b )'."""
    return "Matches: ( " + "".join(f"{m} " for m in sorted(matches, key=str)) + ")"


def format_output(data: Dict[str, Any], format_type: str = "pretty") -> str:
    """Format output for display."""
    if format_type == "json":
        return json.dumps(data, indent=2, default=str)

    if "error" in data:
        return f"Error: {data['error']}"

    lines = []
    for topic, matches in data.get("matches", {}).items():
        lines.append(f"{topic}: {format_matches(matches)}")
    for entry in data.get("subscriptions", []):
        lines.append(f"({entry['subscriber']}, {entry['filter']})")
    return "\n".join(lines)


def run_demo(index: SubscriptionIndex, out=None):
    """Subscribe, match and unsubscribe through a fixed scenario, printing each step."""
    out = out or sys.stdout

    def show_matches():
        for topic in DEMO_TOPICS:
            print(f"Getting matches for topic: {topic}", file=out)
            print(format_matches(index.publish(topic)), file=out)

    for subscription in DEMO_SUBSCRIPTIONS:
        print(f"Adding subscription: {subscription}", file=out)
        index.add_subscription(subscription)
    show_matches()

    for subscription in (Subscription("Subscriber01", "a/b/d"),
                         Subscription("Subscriber02", "a"),
                         Subscription("Subscriber02", "a/c")):
        print(f"Removing subscription: {subscription}", file=out)
        removed = index.remove_subscription(subscription)
        if not removed:
            print(f"Not subscribed: {subscription}", file=out)
        show_matches()


def build_index(args) -> SubscriptionIndex:
    config = Config(args.config)
    if args.delimiter:
        config.set("index", "delimiter", args.delimiter)
    logger = Logger("cli", level=args.log_level, stream=sys.stderr)
    return SubscriptionIndex(config=config, logger=logger)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="PyTopic topic filter CLI")
    parser.add_argument("--config", default=None, help="Config file (default: pytopic.yaml or PYTOPIC_CONFIG env)")
    parser.add_argument("--delimiter", default=None, help="Level delimiter (default: /)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARN", help="Log level for stderr logging")
    parser.add_argument("--format", choices=["pretty", "json"], default="pretty", help="Output format")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    match = subparsers.add_parser("match", help="Match topics against subscriptions from a file")
    match.add_argument("--subscriptions", "-s", required=True, help="YAML or JSON subscription file")
    match.add_argument("--unique", action="store_true", help="Report each subscriber once per topic")
    match.add_argument("topics", nargs="+", help="Published topics")

    list_cmd = subparsers.add_parser("list", help="List subscriptions from a file")
    list_cmd.add_argument("--subscriptions", "-s", required=True, help="YAML or JSON subscription file")
    list_cmd.add_argument("--subscriber", help="Only this subscriber")

    subparsers.add_parser("demo", help="Run the built-in subscribe/unsubscribe scenario")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        index = build_index(args)

        if args.command == "demo":
            run_demo(index)
            return 0

        index.load(read_subscriptions(args.subscriptions))

        if args.command == "match":
            result = {"matches": {topic: index.publish(topic, unique=args.unique or None)
                                  for topic in args.topics}}
            if args.format == "json":
                result["matches"] = {topic: sorted(matches, key=str)
                                     for topic, matches in result["matches"].items()}
        else:
            result = {"subscriptions": [
                {"subscriber": sub.subscriber_id, "filter": sub.topic_filter}
                for sub in index.subscriptions(args.subscriber)
            ]}
    except (PyTopicError, ValueError, OSError, yaml.YAMLError) as e:
        print(format_output({"error": str(e)}, args.format))
        return 1

    print(format_output(result, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
