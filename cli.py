#!/usr/bin/env python3
"""Simple CLI for trying the swap form locally"""

import argparse
import asyncio
from typing import Optional

import httpx

from swapform.config import settings
from swapform.core.swap import (
    DrivingField,
    FieldLockedError,
    SettlementSimulator,
    SubmissionRejected,
    SwapController,
    UnknownAssetError,
)
from swapform.logging_config import setup_logging
from swapform.services.token_search import DebouncedTokenSearch, filter_assets
from swapform.services.tokens import TokenCatalogError, get_token_catalog


def print_tokens(assets):
    """Pretty print a token list"""
    if not assets:
        print("No matching tokens found.")
        return

    print(f"\n{'Symbol':<10} {'Price (USD)':>16}")
    print("-" * 28)
    for asset in assets:
        price_str = f"${asset.price_usd:,.4f}" if asset.price_usd is not None else "No price"
        print(f"{asset.symbol:<10} {price_str:>16}")


def print_form(snapshot: dict):
    """Render the swap form as text"""
    from_symbol = snapshot["fromAsset"]["symbol"]
    to_symbol = snapshot["toAsset"]["symbol"]
    driving = snapshot["drivingField"]

    print("\n" + "=" * 44)
    marker = "✏️ " if driving == "from" else "  "
    print(f"{marker}Send:    {snapshot['fromAmount'] or '0.0':>20} {from_symbol}")
    print(f"   Balance: {snapshot['maxBalance']} {from_symbol}")
    marker = "✏️ " if driving == "to" else "  "
    lock = " 🔒" if snapshot["toFieldLocked"] else ""
    print(f"{marker}Receive: {snapshot['toAmount'] or '0.0':>20} {to_symbol}{lock}")
    print("-" * 44)
    print(f"Rate:         1 {from_symbol} = {snapshot['rate'] or '---'} {to_symbol}")
    print(f"Slippage Fee: {snapshot['slippagePercent']}%")
    print("=" * 44)

    if snapshot["error"]:
        print(f"⚠️  {snapshot['error']['message']}")
    if snapshot["lastFailure"]:
        print(f"❌ {snapshot['lastFailure']}")
    print("✅ Ready to submit" if snapshot["canSubmit"] else "⛔ Submit disabled")


async def cli_tokens(query: Optional[str] = None):
    """CLI command to list tokens"""
    try:
        catalog = get_token_catalog()
    except TokenCatalogError as e:
        print(f"❌ Error: {e}")
        return
    print_tokens(filter_assets(catalog.assets, query))


async def cli_shell(from_symbol: Optional[str] = None, to_symbol: Optional[str] = None):
    """Interactive swap form"""
    controller = SwapController(get_token_catalog().assets, from_symbol=from_symbol, to_symbol=to_symbol)
    simulator = SettlementSimulator(controller)
    search = DebouncedTokenSearch(controller.assets)

    print("💱 Swap Form")
    print("Type 'exit' to quit, 'help' for commands")
    print_form(controller.snapshot())

    while True:
        try:
            user_input = input("\n> ").strip()
            if not user_input:
                continue

            command, _, rest = user_input.partition(" ")
            command = command.lower()
            rest = rest.strip()

            if command in ['exit', 'quit', 'q']:
                print("Goodbye! 👋")
                break

            elif command in ['help', 'h']:
                print("\nCommands:")
                print("  from <amount>        - Type the amount to send")
                print("  to <amount>          - Type the amount to receive")
                print("  pick from|to <SYM>   - Choose a token for one side")
                print("  reverse              - Swap the two sides")
                print("  submit               - Confirm the swap")
                print("  tokens [query]       - Search tokens")
                print("  show                 - Show the form")
                print("  exit                 - Quit")
                continue

            elif command == 'from':
                controller.edit_from(rest)

            elif command == 'to':
                controller.edit_to(rest)

            elif command == 'pick':
                side, _, symbol = rest.partition(" ")
                if side not in ('from', 'to') or not symbol.strip():
                    print("Usage: pick from|to <SYMBOL>")
                    continue
                controller.select(DrivingField(side), symbol.strip())

            elif command == 'reverse':
                controller.reverse()

            elif command == 'submit':
                simulator.submit()
                print("⏳ Processing Transaction...")
                receipt = await simulator.wait()
                if receipt:
                    print(f"✅ {receipt.message}")

            elif command == 'tokens':
                results = await search.search(rest)
                hidden = controller.state.to_asset
                print_tokens([asset for asset in results or [] if asset != hidden])
                continue

            elif command != 'show':
                print(f"Unknown command: {command} (type 'help')")
                continue

            print_form(controller.snapshot())

        except (SubmissionRejected, FieldLockedError, UnknownAssetError) as e:
            print(f"❌ {e.message}")
        except KeyboardInterrupt:
            print("\nGoodbye! 👋")
            break


async def cli_remote_quote(
    from_symbol: str,
    to_symbol: str,
    amount: str,
    base_url: str,
    submit: bool = False,
):
    """Drive a swap session on a running API server."""
    async with httpx.AsyncClient(base_url=base_url, timeout=30) as client:
        response = await client.post("/swap/sessions", json={"from_symbol": from_symbol, "to_symbol": to_symbol})
        response.raise_for_status()
        session_id = response.json()["sessionId"]

        response = await client.post(f"/swap/sessions/{session_id}/amount", json={"field": "from", "value": amount})
        response.raise_for_status()
        snapshot = response.json()
        print_form(snapshot)

        if submit:
            response = await client.post(f"/swap/sessions/{session_id}/submit", params={"wait": True})
            if response.status_code == 409:
                print(f"❌ {response.json()['detail']['message']}")
                return
            response.raise_for_status()
            receipt = response.json().get("lastReceipt")
            if receipt:
                print(f"✅ {receipt['message']}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Swap form CLI")
    subparsers = parser.add_subparsers(dest="command")

    tokens_parser = subparsers.add_parser("tokens", help="List tokens and prices")
    tokens_parser.add_argument("query", nargs="?", help="Filter by symbol or name")

    shell_parser = subparsers.add_parser("shell", help="Interactive swap form")
    shell_parser.add_argument("--from", dest="from_symbol", help="Token to send")
    shell_parser.add_argument("--to", dest="to_symbol", help="Token to receive")

    remote_parser = subparsers.add_parser("remote", help="Quote (and optionally submit) via a running API server")
    remote_parser.add_argument("from_symbol", help="Token to send")
    remote_parser.add_argument("to_symbol", help="Token to receive")
    remote_parser.add_argument("amount", help="Amount to send")
    remote_parser.add_argument("--submit", action="store_true", help="Submit and wait for settlement")
    remote_parser.add_argument(
        "--base-url",
        default=f"http://{settings.host}:{settings.port}",
        help="API base URL",
    )

    parser.add_argument("--log-level", default="WARNING", help="Log level for the CLI session")

    return parser


async def main():
    parser = build_parser()
    args = parser.parse_args()
    setup_logging(args.log_level, json_logs=False)

    if not args.command:
        parser.print_help()
        return

    command = args.command.lower()

    if command == "tokens":
        await cli_tokens(args.query)

    elif command == "shell":
        await cli_shell(args.from_symbol, args.to_symbol)

    elif command == "remote":
        await cli_remote_quote(args.from_symbol, args.to_symbol, args.amount, args.base_url, args.submit)

    else:
        print(f"❌ Unknown command: {command}")
        parser.print_help()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
