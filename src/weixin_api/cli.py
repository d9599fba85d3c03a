"""Command line interface for the WeChat API client.

Builds authorization URLs from configuration and probes web access tokens.
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from . import __version__
from .core import WeixinClient, WeixinConfig, get_logger, setup_logging
from .exceptions import WeixinError
from .official_account import SCOPE_SNSAPI_BASE, SCOPE_SNSAPI_USERINFO, OfficialAccountOAuth
from .open_platform import OpenPlatformAuth
from .work import WorkAgent

logger = get_logger("cli")

console = Console()

URL_FLOWS = ("official", "open", "open-mobile", "work", "work-sso")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="weixin-api",
        description="WeChat API client - authorization URLs and token checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Official account authorization URL
  weixin-api -c weixin.yaml authorize-url official -r https://example.com/cb -s state

  # WeCom SSO login URL
  weixin-api authorize-url work-sso -r https://example.com/cb

  # Check a web access token
  weixin-api -c weixin.yaml validate-token ACCESS_TOKEN OPENID
        """,
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s v{__version__}",
        help="Show program's version number and exit",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to a YAML or JSON configuration file (default: environment only)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    url_parser = subparsers.add_parser("authorize-url", help="Print an authorization URL")
    url_parser.add_argument("flow", choices=URL_FLOWS, help="Authorization flow")
    url_parser.add_argument("-r", "--redirect-uri", required=True, help="Callback URL")
    url_parser.add_argument("-s", "--state", default="", help="State echoed to the callback")
    url_parser.add_argument(
        "--scope",
        default=SCOPE_SNSAPI_BASE,
        choices=(SCOPE_SNSAPI_BASE, SCOPE_SNSAPI_USERINFO),
        help="Official account scope (default: snsapi_base)",
    )
    url_parser.add_argument("--pre-auth-code", default="", help="Open platform pre_auth_code")
    url_parser.add_argument("--biz-appid", default="", help="Open platform target AppID")
    url_parser.add_argument(
        "--auth-type", type=int, default=0, help="Open platform auth_type"
    )

    token_parser = subparsers.add_parser(
        "validate-token", help="Check an official account web access token"
    )
    token_parser.add_argument("access_token", help="Web access token")
    token_parser.add_argument("openid", help="User openid")

    subparsers.add_parser("show-config", help="Print the effective configuration")

    return parser


def load_config(path: str | None) -> WeixinConfig:
    """Load configuration from ``path`` or from the environment."""
    if not path:
        return WeixinConfig()
    return WeixinConfig.from_file(Path(path))


def cmd_authorize_url(args: argparse.Namespace, config: WeixinConfig) -> int:
    """Handle authorize-url command."""
    # URL builders never touch the network, an unconnected transport is enough
    client = WeixinClient.from_config(config.http, work=args.flow.startswith("work"))

    if args.flow == "official":
        oauth = OfficialAccountOAuth(config.official_account, client)
        url = oauth.get_authorize_url(args.redirect_uri, args.scope, args.state)
    elif args.flow in ("open", "open-mobile"):
        if not args.pre_auth_code:
            console.print("[red]--pre-auth-code is required for open platform flows[/]")
            return 1
        auth = OpenPlatformAuth(config.open_platform, client)
        build = (
            auth.get_authorization_redirect_uri
            if args.flow == "open"
            else auth.get_mobile_authorization_redirect_uri
        )
        url = build(args.pre_auth_code, args.redirect_uri, args.biz_appid, args.auth_type)
    elif args.flow == "work":
        url = WorkAgent(config.work, client).get_authorize_url(args.redirect_uri, args.state)
    else:
        url = WorkAgent(config.work, client).get_sso_authorize_url(args.redirect_uri, args.state)

    console.print(url, soft_wrap=True, markup=False, highlight=False)
    return 0


async def _validate_token(config: WeixinConfig, access_token: str, openid: str) -> bool:
    async with WeixinClient.from_config(config.http) as client:
        oauth = OfficialAccountOAuth(config.official_account, client)
        return await oauth.validate_token(access_token, openid)


def cmd_validate_token(args: argparse.Namespace, config: WeixinConfig) -> int:
    """Handle validate-token command."""
    try:
        valid = asyncio.run(_validate_token(config, args.access_token, args.openid))
    except WeixinError as e:
        logger.error("Token check failed: %s", e)
        return 1

    if valid:
        console.print("[green]Token is valid[/]")
        return 0
    console.print("[yellow]Token is invalid or expired[/]")
    return 2


def cmd_show_config(args: argparse.Namespace, config: WeixinConfig) -> int:
    """Handle show-config command. Secrets are masked."""
    table = Table(title="WeChat API configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    secrets = {"secret", "component_appsecret"}
    for section, values in config.to_dict().items():
        for key, value in values.items():
            shown = "******" if key in secrets and value else str(value)
            table.add_row(f"{section}.{key}", shown)

    console.print(table)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Optional sequence of CLI arguments (without the program name).

    Returns:
        Process exit code. 0 for success.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading configuration:[/] {e}")
        return 1

    if args.debug:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)

    handlers = {
        "authorize-url": cmd_authorize_url,
        "validate-token": cmd_validate_token,
        "show-config": cmd_show_config,
    }
    return handlers[args.command](args, config)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
