"""Command line entry point for hostpin."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import asyncssh

from hostpin.config import Settings
from hostpin.errors import TrustError
from hostpin.known_hosts import TrustStore
from hostpin.models import SSHTarget
from hostpin.services import Disposition, TrustDecisionEngine, connect
from hostpin.utils.address import format_host
from hostpin.utils.console import configure_logging
from hostpin.utils.fingerprint import fingerprint
from hostpin.utils.target import parse_target

logger = logging.getLogger(__name__)

# ssh(1) exits with 255 when the connection itself fails
EXIT_CONNECTION_FAILED = 255


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="hostpin",
        description="SSH with trust-on-first-use host key pinning",
    )
    parser.add_argument("--known-hosts", help="known_hosts file to use")
    parser.add_argument("--log-level", help="Log level (default: INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    connect_parser = sub.add_parser(
        "connect", help="Verify a host key and optionally run a remote command"
    )
    connect_parser.add_argument("target", help="[user@]host[:port]")
    connect_parser.add_argument(
        "remote_command",
        nargs="*",
        help="Command to run; put it after -- if it has options",
    )
    connect_parser.add_argument(
        "--policy",
        choices=[d.value for d in Disposition],
        help="How to handle unknown host keys",
    )
    connect_parser.add_argument(
        "--hash", action="store_true", help="Hash host names of new entries"
    )
    connect_parser.add_argument("-i", "--identity", help="Private key file")

    show_parser = sub.add_parser("show", help="Show pinned keys for a host")
    show_parser.add_argument("host")
    show_parser.add_argument("-p", "--port", type=int)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the command line.

    Everything after the first ``--`` is the remote command, so connect
    options may appear before or after the target.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    command: list[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, command = argv[:split], argv[split + 1 :]

    parser = build_parser()
    args = parser.parse_args(argv)
    if command:
        if args.command != "connect":
            parser.error("only connect takes a remote command")
        args.remote_command = args.remote_command + command
    return args


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command line overrides applied."""
    settings = Settings.from_env()
    if args.known_hosts:
        settings.known_hosts_path = Path(args.known_hosts).expanduser()
    if args.log_level:
        settings.log_level = args.log_level.upper()
    if getattr(args, "policy", None):
        settings.policy = Disposition(args.policy)
    if getattr(args, "hash", False):
        settings.hash_known_hosts = True
    return settings


async def run_remote(
    target: SSHTarget,
    engine: TrustDecisionEngine,
    command: list[str],
    settings: Settings,
    identity: str | None = None,
) -> int:
    """Connect, run a command if given, and return its exit status."""
    options = {"client_keys": [identity]} if identity else {}
    conn = await connect(
        target, engine, connect_timeout=settings.connect_timeout, **options
    )
    try:
        if not command:
            print(f"Host key for {target.host} verified", file=sys.stderr)
            return 0
        result = await conn.run(" ".join(command), check=False)
        sys.stdout.write(str(result.stdout or ""))
        sys.stderr.write(str(result.stderr or ""))
        return result.exit_status or 0
    finally:
        conn.close()
        await conn.wait_closed()


def cmd_connect(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the connect subcommand."""
    try:
        target = parse_target(args.target, settings.default_port)
    except ValueError as e:
        print(f"hostpin: {e}", file=sys.stderr)
        return 2

    try:
        store = TrustStore.load(settings.known_hosts_path)
    except OSError as e:
        logger.error("Cannot open %s: %s", settings.known_hosts_path, e)
        return EXIT_CONNECTION_FAILED

    engine = TrustDecisionEngine(
        store,
        disposition=settings.policy,
        hash_known_hosts=settings.hash_known_hosts,
        default_port=settings.default_port,
    )

    try:
        return asyncio.run(
            run_remote(target, engine, args.remote_command, settings, args.identity)
        )
    except TrustError as e:
        print(f"hostpin: {e}", file=sys.stderr)
        return EXIT_CONNECTION_FAILED
    except (OSError, asyncssh.Error) as e:
        logger.error("Connection to %s failed: %s", target.host, e)
        return EXIT_CONNECTION_FAILED


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the show subcommand."""
    port = args.port if args.port is not None else settings.default_port
    host = format_host(args.host.lower(), port, settings.default_port)

    try:
        store = TrustStore.load(settings.known_hosts_path)
        entries = store.entries_for(host)
    except OSError as e:
        logger.error("Cannot open %s: %s", settings.known_hosts_path, e)
        return 1

    if not entries:
        print(f"{host}: no pinned keys", file=sys.stderr)
        return 1

    for entry in entries:
        marker = " (hashed)" if entry.is_hashed else ""
        print(f"{host} {entry.key_type} {fingerprint(entry.key_blob)}{marker}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the hostpin command line."""
    args = parse_args(argv)
    settings = load_settings(args)
    configure_logging(settings.log_level, settings.log_colors)

    if args.command == "connect":
        return cmd_connect(args, settings)
    return cmd_show(args, settings)


if __name__ == "__main__":
    sys.exit(main())
