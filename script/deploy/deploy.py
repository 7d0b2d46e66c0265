#!/usr/bin/env python3
"""
ERC-8004 v1.0 Multi-Chain Deployment Tool

Deploys the ERC-8004 registries with forge and handles:
- .env configuration loading (PRIVATE_KEY and one RPC URL per network)
- Contract deployment via `forge script`
- Inline explorer verification (--verify) where forge supports it
- OKLink plugin verification for X Layer networks
"""

import argparse
import pathlib
import sys
import traceback
from typing import List, Optional
from lib.formatter import *
from lib.load_config import load_config
from lib.networks import ALL_NETWORKS, VERIFY_ONLY_COMMANDS, Network
from lib.release import ReleaseManager
from lib.runner import CommandRunner, DeploymentRunner
from lib.verifier import OklinkVerifier

USAGE = """\
Usage: python3 script/deploy/deploy.py <network> [--dry-run] [forge args...]

Available networks:
{networks}
  all               - Deploy to all testnets + X Layer

Verification only (uses the latest broadcast file):
  verify_xlayer          - Verify X Layer Mainnet contracts on OKLink
  verify_xlayer_testnet  - Verify X Layer Testnet contracts on OKLink

Examples:
  python3 script/deploy/deploy.py sepolia
  python3 script/deploy/deploy.py xlayer_testnet
  python3 script/deploy/deploy.py all

Prerequisites:
  1. Create .env file with PRIVATE_KEY and RPC URLs
  2. Ensure deployer wallet has testnet tokens
  3. Set block explorer API keys for verification
"""

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ERC-8004 v1.0 Deployment Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
IMPORTANT:
  - This script is designed to be run from the root directory of the project.
  - The network name must match an [rpc_endpoints] alias in foundry.toml.
  - Any unrecognised option is passed through to `forge script`.

Examples:
  python3 script/deploy/deploy.py sepolia
  python3 script/deploy/deploy.py xlayer --dry-run
  python3 script/deploy/deploy.py verify_xlayer_testnet
  python3 script/deploy/deploy.py all
        """
    )

    parser.add_argument("network", nargs="?", default="help", help="Network to deploy to, 'all', or 'help'")
    parser.add_argument("--dry-run", action="store_true", help="Print the commands without running them")
    parser.add_argument("--env-file", type=pathlib.Path, default=None, help="Path to the .env file (default: <root>/.env)")
    parser.add_argument("--root", type=pathlib.Path, default=None, help="Project root (default: current directory)")
    return parser


def print_usage():
    print_section("ERC-8004 v1.0 Deployment Script")
    networks = "\n".join(f"  {n.identifier:<17} - {n.descriptor.description}" for n in ALL_NETWORKS)
    print(USAGE.format(networks=networks))


def is_known_command(token: str) -> bool:
    return token == "all" or token in VERIFY_ONLY_COMMANDS or Network.from_identifier(token) is not None


def run(args: argparse.Namespace, forge_args: List[str]) -> int:
    root_dir = (args.root or pathlib.Path.cwd()).resolve()

    try:
        config = load_config(root_dir, args.env_file)
    except (FileNotFoundError, ValueError) as e:
        print_error(f"Configuration error: {e}")
        return EXIT_FAILURE

    runner = CommandRunner(config, dry_run=args.dry_run)
    verifier = OklinkVerifier(config, runner)
    deployment_runner = DeploymentRunner(config, runner, verifier, forge_args)

    if args.network == "all":
        release_manager = ReleaseManager(deployment_runner)
        return EXIT_OK if release_manager.deploy_all() else EXIT_FAILURE

    if args.network in VERIFY_ONLY_COMMANDS:
        network = VERIFY_ONLY_COMMANDS[args.network]
        print_section(f"Verify only: {network.descriptor.display_name} via OKLink")
        report = verifier.verify(network.descriptor.oklink)
        return EXIT_OK if report.ok else EXIT_FAILURE

    network = Network.from_identifier(args.network)
    report = deployment_runner.deploy_network(network)
    return EXIT_FAILURE if report.failed else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args, forge_args = parser.parse_known_args(argv)

    if args.network == "help" or not is_known_command(args.network):
        if args.network != "help":
            print_warning(f"Unknown network: {args.network}")
        print_usage()
        return EXIT_OK

    if args.network in VERIFY_ONLY_COMMANDS and forge_args:
        print_warning(f"Ignoring forge script arguments for {args.network}: {' '.join(forge_args)}")

    try:
        return run(args, forge_args)
    except KeyboardInterrupt:
        print_error("Aborted by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        print_error(f"Deployment failed: {str(e)}")
        print_error("Full traceback:")
        traceback.print_exc()
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
