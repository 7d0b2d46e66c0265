#!/usr/bin/env python3
"""
ERC-8004 Deployment Tool - OKLink Contract Verifier

Reads the latest forge broadcast artifact for a chain, picks out the deployed
registry addresses and submits each one to the OKLink verification plugin
through `forge verify-contract`.
"""

import json
import pathlib
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from .formatter import *
from .load_config import DeployConfig
from .networks import OklinkTarget
from .runner import CommandResult, CommandRunner

BROADCAST_SCRIPT = "Deploy.s.sol"

IDENTITY_REGISTRY = "IdentityRegistry"
REPUTATION_REGISTRY = "ReputationRegistry"
VALIDATION_REGISTRY = "ValidationRegistry"
REGISTRIES = (IDENTITY_REGISTRY, REPUTATION_REGISTRY, VALIDATION_REGISTRY)

# Reputation and Validation registries take the IdentityRegistry address
CONSTRUCTOR_SIGNATURE = "constructor(address)"


class BroadcastError(ValueError):
    """The broadcast artifact is missing or does not contain what we need"""


def broadcast_file(root_dir: pathlib.Path, chain_id: int) -> pathlib.Path:
    return root_dir / "broadcast" / BROADCAST_SCRIPT / str(chain_id) / "run-latest.json"


def _clean_address(address) -> Optional[str]:
    if not address or not isinstance(address, str) or address == "null":
        return None
    return address


def read_registry_addresses(path: pathlib.Path) -> Dict[str, Optional[str]]:
    """
    Extract registry addresses from a forge broadcast file.

    The first transaction whose contractName matches wins; registries that were
    not deployed map to None.

    Raises:
        BroadcastError: file missing, unreadable, or IdentityRegistry absent
    """
    if not path.exists():
        raise BroadcastError(f"Broadcast file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            broadcast = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        raise BroadcastError(f"Failed to parse broadcast file {path}: {e}")

    if not isinstance(broadcast, dict):
        raise BroadcastError(f"Unexpected broadcast format in {path}: top level is not an object")
    transactions = broadcast.get("transactions") or []
    if not isinstance(transactions, list):
        raise BroadcastError(f"Unexpected broadcast format in {path}: transactions is not a list")

    addresses: Dict[str, Optional[str]] = {name: None for name in REGISTRIES}
    found = set()
    for tx in transactions:
        if not isinstance(tx, dict):
            continue
        name = tx.get("contractName")
        if name in addresses and name not in found:
            found.add(name)
            addresses[name] = _clean_address(tx.get("contractAddress"))

    if addresses[IDENTITY_REGISTRY] is None:
        raise BroadcastError(f"Could not find {IDENTITY_REGISTRY} address in {path}")
    return addresses


@dataclass
class VerificationReport:
    ok: bool
    submitted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class OklinkVerifier:
    def __init__(self, config: DeployConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner
        self.root_dir = config.root_dir
        self.log_dir = config.root_dir / "script" / "deploy" / "logs"

    def verify(self, target: OklinkTarget) -> VerificationReport:
        """Submit every deployed registry on the target chain for OKLink verification"""
        if not target.short_name:
            print_error(f"OKLink chain short name missing for chain {target.chain_id}")
            return VerificationReport(ok=False)

        latest_json = broadcast_file(self.root_dir, target.chain_id)
        try:
            addresses = read_registry_addresses(latest_json)
        except BroadcastError as e:
            print_error(str(e))
            if not latest_json.exists():
                print_warning("Run deployment first so we can pick up addresses to verify.")
            return VerificationReport(ok=False)

        print_subsection(f"Verifying on OKLink ({target.short_name}) using {target.verifier_url}")
        report = VerificationReport(ok=True)
        identity = addresses[IDENTITY_REGISTRY]

        self._submit(target, IDENTITY_REGISTRY, identity, None, 1, report)

        constructor_args = self._encode_constructor_args(identity)
        if constructor_args is None:
            report.ok = False
            return report

        for index, name in enumerate((REPUTATION_REGISTRY, VALIDATION_REGISTRY), start=2):
            if addresses[name] is None:
                print_info(f"{name} not found in broadcast, skipping")
                continue
            self._submit(target, name, addresses[name], constructor_args, index, report)

        print_success("OKLink verification commands submitted. "
                      "Use --watch logs above or run 'forge verify-check' with your GUID if needed.")
        return report

    def _submit(self, target: OklinkTarget, name: str, address: str, constructor_args: Optional[str],
                index: int, report: VerificationReport):
        print_step(f"[{index}/{len(REGISTRIES)}] Verifying {name} at {address} ...")
        cmd = self._build_command(target, name, address, constructor_args)
        result = self.runner.run(cmd, tee=True)
        self._write_log(target, name, result)
        report.submitted.append(name)
        if result.ok:
            print_success(f"{name} ({format_address(address)}) submitted")
        else:
            # One failed submission must not stop the others
            print_warning(f"Verification of {name} failed with exit code {result.returncode}")
            report.failed.append(name)

    def _build_command(self, target: OklinkTarget, name: str, address: str,
                       constructor_args: Optional[str]) -> List[str]:
        cmd = ["forge", "verify-contract", address, f"src/{name}.sol:{name}"]
        if constructor_args:
            cmd.extend(["--constructor-args", constructor_args])
        cmd.extend([
            "--chain", str(target.chain_id),
            "--verifier", "oklink",
            "--verifier-url", target.verifier_url,
            "--watch",
        ])
        return cmd

    def _encode_constructor_args(self, identity_address: str) -> Optional[str]:
        """ABI-encode the IdentityRegistry address as a single-address constructor argument"""
        result = self.runner.run(["cast", "abi-encode", CONSTRUCTOR_SIGNATURE, identity_address], capture=True)
        if self.runner.dry_run:
            return f"$(cast abi-encode \"{CONSTRUCTOR_SIGNATURE}\" {identity_address})"
        encoded = result.stdout.strip()
        if not result.ok or not encoded:
            print_error(f"Failed to encode constructor args for {identity_address}: {result.stderr.strip()}")
            return None
        return encoded

    def _write_log(self, target: OklinkTarget, name: str, result: CommandResult):
        if self.runner.dry_run:
            return
        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = self.log_dir / f"verify-{target.chain_id}-{name}.log"
        with open(log_file, "w") as f:
            f.write(f"Command: {format_command(result.cmd, self.config)}\n")
            f.write(f"Exit code: {result.returncode}\n")
            f.write(f"Duration: {format_duration(result.duration)}\n")
            f.write("\n" + "=" * 50 + "\n")
            if result.stdout:
                f.write("=== FORGE STDOUT ===\n")
                f.write(result.stdout)
                f.write("\n")
            if result.stderr:
                f.write("=== FORGE STDERR ===\n")
                f.write(result.stderr)
                f.write("\n")
        print_info(f"Verification output written to: {format_path(log_file, self.root_dir)}")
