"""Shared pytest fixtures for deployment tool tests."""

import io
import json
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from lib.load_config import DeployConfig
from lib.networks import Network
from lib.runner import CommandResult

PRIVATE_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
IDENTITY_ADDR = "0xAAAaaaaAAAAaaaaaAAAaaAAAaAAAAaAaAAAaAAa1"
REPUTATION_ADDR = "0xBBBbbbbBBBBbbbbbBBBbbBBBbBBBBbBbBBBbBBb2"
VALIDATION_ADDR = "0xCCCccccCCCCcccccCCCccCCCcCCCCcCcCCCcCCc3"
ENCODED_IDENTITY = "0x000000000000000000000000aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa1"


class FakeRunner:
    """Stands in for CommandRunner: records commands, answers with scripted exit codes."""

    def __init__(self, responder: Optional[Callable[[List[str]], CommandResult]] = None):
        self.dry_run = False
        self.calls: List[List[str]] = []
        self.options: List[Dict[str, bool]] = []
        self.responder = responder

    def run(self, cmd: List[str], capture: bool = False, tee: bool = False) -> CommandResult:
        self.calls.append(list(cmd))
        self.options.append({"capture": capture, "tee": tee})
        if self.responder:
            return self.responder(cmd)
        if cmd[:2] == ["cast", "abi-encode"]:
            return CommandResult(cmd, 0, stdout=ENCODED_IDENTITY + "\n")
        return CommandResult(cmd, 0, duration=1.5)

    def commands(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if c[:len(prefix)] == list(prefix)]


@pytest.fixture(autouse=True)
def clean_environ(monkeypatch):
    """Keep the developer's shell environment out of configuration loading."""
    monkeypatch.delenv("PRIVATE_KEY", raising=False)
    for network in Network:
        monkeypatch.delenv(network.descriptor.rpc_var, raising=False)


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def write_env(root_dir: Path) -> Callable[..., Path]:
    """Write a .env file at the project root from keyword arguments."""

    def _write(**values: str) -> Path:
        env_file = root_dir / ".env"
        env_file.write_text("".join(f"{k}={v}\n" for k, v in values.items()))
        return env_file

    return _write


@pytest.fixture
def all_rpc_urls() -> Dict[str, str]:
    return {n.descriptor.rpc_var: f"https://rpc.example/{n.identifier}/secret-key" for n in Network}


@pytest.fixture
def make_config(root_dir: Path) -> Callable[..., DeployConfig]:
    def _make(**values: str) -> DeployConfig:
        merged = {"PRIVATE_KEY": PRIVATE_KEY, **values}
        return DeployConfig(
            root_dir=root_dir,
            env_file=root_dir / ".env",
            private_key=merged["PRIVATE_KEY"],
            values=merged,
        )

    return _make


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def write_broadcast(root_dir: Path) -> Callable[..., Path]:
    """Write broadcast/Deploy.s.sol/<chain>/run-latest.json with the given transactions."""

    def _write(chain_id: int, transactions: List[Dict[str, Any]]) -> Path:
        path = root_dir / "broadcast" / "Deploy.s.sol" / str(chain_id) / "run-latest.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump({"transactions": transactions, "receipts": [], "chain": chain_id}, f, indent=2)
        return path

    return _write


def tx(name: str, address: Optional[str]) -> Dict[str, Any]:
    return {
        "hash": "0x" + "ab" * 32,
        "transactionType": "CREATE",
        "contractName": name,
        "contractAddress": address,
    }


@pytest.fixture
def fake_subprocess(monkeypatch):
    """Replace subprocess.run and Popen inside the runner; records every command started."""
    calls: List[List[str]] = []
    exit_codes: Dict[str, int] = {}

    def _run(cmd, **kwargs):
        calls.append(list(cmd))
        if cmd[:2] == ["cast", "abi-encode"]:
            return subprocess.CompletedProcess(cmd, 0, ENCODED_IDENTITY + "\n", "")
        rpc = cmd[cmd.index("--rpc-url") + 1] if "--rpc-url" in cmd else None
        return subprocess.CompletedProcess(cmd, exit_codes.get(rpc, 0), "", "")

    def _popen(cmd, **kwargs):
        calls.append(list(cmd))
        lines = [f"Submitting verification for {cmd[3]}\n", "Contract successfully verified\n"]
        return FakePopen(cmd, lines, exit_codes.get("verify-contract", 0))

    monkeypatch.setattr("lib.runner.subprocess.run", _run)
    monkeypatch.setattr("lib.runner.subprocess.Popen", _popen)
    _run.calls = calls
    _run.exit_codes = exit_codes
    return _run


class FakePopen:
    """Minimal Popen double: serves canned output lines, then an exit code."""

    def __init__(self, cmd: List[str], lines: List[str], returncode: int = 0):
        self.args = cmd
        self.stdout = io.StringIO("".join(lines))
        self.returncode = returncode

    def wait(self) -> int:
        return self.returncode
