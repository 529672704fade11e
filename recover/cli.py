"""imsg-recover command line: init, export, show, inspect."""

import argparse
import sys
from pathlib import Path

from . import chatdb, config
from .export import export_history, format_message
from .extract import run_strategies
from .messages import fetch_and_enhance
from .utils import parse_date, parse_since


def _since_arg(value):
    try:
        return parse_since(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _date_arg(value):
    try:
        return parse_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}'. Use YYYY-MM-DD")


def cmd_init(args):
    """Interactive setup that writes config.json for one contact."""
    instance_dir = Path(args.instance_dir)
    config.init(instance_dir)
    if config.get_config_path().exists():
        print(f"Instance already exists at {instance_dir}")
        print("To re-initialize, delete config.json first.")
        return 1

    contact = args.contact or input("Contact phone number or email (e.g., +15551234567): ").strip()
    if not contact:
        print("Contact is required.")
        return 1

    cfg = {"contact": contact, "filter_reactions": True, "show_limit": config.DEFAULT_SHOW_LIMIT}
    config.save_config(cfg)
    print(f"Wrote {config.get_config_path()}")
    print(f"\nNext steps:")
    print(f"  imsg-recover show {instance_dir}       # Recent messages")
    print(f"  imsg-recover export {instance_dir}     # Full markdown history")
    return 0


def cmd_export(args):
    config.init(args.instance_dir)
    contact = args.contact or config.get_contact()
    output = Path(args.output) if args.output else config.get_output_path()
    start_dt = args.since or args.start
    export_history(
        contact, output, config.get_chat_db_path(),
        start_dt=start_dt, end_dt=args.end,
        filter_reactions=config.get_filter_reactions(),
    )
    return 0


def cmd_show(args):
    config.init(args.instance_dir)
    contact = args.contact or config.get_contact()
    limit = args.limit or config.get_show_limit()
    messages = fetch_and_enhance(
        contact, config.get_chat_db_path(), limit=limit,
        filter_reactions=config.get_filter_reactions(),
    )
    print(f"{len(messages)} text message{'s' if len(messages) != 1 else ''} with {contact}:\n")
    for msg in messages:
        print(format_message(msg))
    return 0


def cmd_inspect(args):
    """Show what every strategy makes of one message's attributedBody."""
    config.init(args.instance_dir)
    conn = chatdb.get_connection(config.get_chat_db_path())
    try:
        blob = chatdb.fetch_attributed_body(conn, args.rowid)
    finally:
        conn.close()
    if blob is None:
        print(f"Message {args.rowid} has no attributedBody")
        return 1
    print(f"Message {args.rowid}: {len(blob)} bytes")
    for name, outcome in run_strategies(blob, stop_on_success=False):
        print(f"  {name:<10} {outcome}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="imsg-recover",
        description="Recover and export Messages text stored only in attributedBody",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  imsg-recover init <dir>                        # Set the contact
  imsg-recover export <dir>                      # Full history to conversation.md
  imsg-recover export <dir> --since 30d          # Last 30 days only
  imsg-recover show <dir> --limit 50             # Print recent messages
  imsg-recover inspect <dir> 224717              # Debug one message's blob
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="Create config.json for a contact")
    p.add_argument("instance_dir")
    p.add_argument("--contact")
    p.set_defaults(func=cmd_init)

    p = sub.add_parser("export", help="Export message history to markdown")
    p.add_argument("instance_dir")
    p.add_argument("--contact", help="Override the configured contact")
    p.add_argument("--since", type=_since_arg, help="Relative window, e.g. 3d, 2w, 1m")
    p.add_argument("--start", type=_date_arg, help="Only messages on/after YYYY-MM-DD")
    p.add_argument("--end", type=_date_arg, help="Only messages before YYYY-MM-DD")
    p.add_argument("--output", "-o", help="Markdown output path")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("show", help="Print the most recent text messages")
    p.add_argument("instance_dir")
    p.add_argument("--contact", help="Override the configured contact")
    p.add_argument("--limit", "-n", type=int)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("inspect", help="Show every strategy's result for one message")
    p.add_argument("instance_dir")
    p.add_argument("rowid", type=int)
    p.set_defaults(func=cmd_inspect)

    return parser


def main(args=None):
    parsed = build_parser().parse_args(args)
    try:
        return parsed.func(parsed)
    except (FileNotFoundError, PermissionError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
