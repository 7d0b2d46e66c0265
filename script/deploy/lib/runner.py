#!/usr/bin/env python3
"""
ERC-8004 Deployment Tool - Deployment Runner

Handles deployment execution using forge, including command construction
and command execution with proper error handling.

Every external process goes through CommandRunner.run, which returns a
CommandResult; callers decide whether a non-zero exit matters.

If you want to modify the deploy command arguments look at
DeploymentRunner._build_command.
"""

import subprocess
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
from .formatter import *
from .load_config import DeployConfig
from .networks import Network, VerifyMode

DEPLOY_SCRIPT = "script/Deploy.s.sol:Deploy"

# Exit status reported when the executable itself cannot be started
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    cmd: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs one external command at a time, blocking until it exits"""

    def __init__(self, config: DeployConfig, dry_run: bool = False):
        self.config = config
        self.dry_run = dry_run

    def run(self, cmd: List[str], capture: bool = False, tee: bool = False) -> CommandResult:
        """
        Run a command

        Args:
            cmd: Command and arguments
            capture: Capture stdout/stderr instead of streaming to the terminal
            tee: Stream output to the terminal as it arrives and also keep it
                 (stderr is merged into stdout)

        Returns:
            CommandResult with exit status, output (if captured) and duration
        """
        print_command(cmd, self.config)
        if self.dry_run:
            print_info("Dry run mode, command not executed")
            return CommandResult(cmd, 0)

        start = time.monotonic()
        try:
            if tee:
                return self._run_tee(cmd, start)
            if capture:
                process = subprocess.run(cmd, cwd=self.config.root_dir, env=self.config.child_env(),
                                         capture_output=True, text=True)
            else:
                process = subprocess.run(cmd, cwd=self.config.root_dir, env=self.config.child_env(),
                                         text=True)
        except FileNotFoundError:
            print_error(f"{cmd[0]} not found. Is Foundry installed and on PATH?")
            return CommandResult(cmd, EXIT_NOT_FOUND, duration=time.monotonic() - start)

        return CommandResult(
            cmd,
            process.returncode,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
            duration=time.monotonic() - start,
        )

    def _run_tee(self, cmd: List[str], start: float) -> CommandResult:
        process = subprocess.Popen(
            cmd,
            cwd=self.config.root_dir,
            env=self.config.child_env(),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1
        )
        lines = []
        with process.stdout:
            for line in process.stdout:
                print(f"  {line}", end="", flush=True)
                lines.append(line)
        returncode = process.wait()
        return CommandResult(cmd, returncode, stdout="".join(lines), duration=time.monotonic() - start)


class DeploymentOutcome(Enum):
    DEPLOYED = "deployed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DeploymentReport:
    network: Network
    outcome: DeploymentOutcome
    result: Optional[CommandResult] = None

    @property
    def failed(self) -> bool:
        return self.outcome is DeploymentOutcome.FAILED


class DeploymentRunner:
    def __init__(self, config: DeployConfig, runner: CommandRunner, verifier=None,
                 forge_args: Optional[List[str]] = None):
        self.config = config
        self.runner = runner
        # OklinkVerifier, only needed for X Layer networks
        self.verifier = verifier
        self.forge_args = forge_args or []

    def deploy_network(self, network: Network) -> DeploymentReport:
        """Run the Deploy script against a single network"""
        descriptor = network.descriptor
        print_section(f"Deploying to {descriptor.display_name}")
        if descriptor.note:
            print_info(descriptor.note)

        if not self.config.rpc_url(network):
            print_warning(f"{descriptor.rpc_var} not set, skipping {descriptor.display_name}")
            return DeploymentReport(network, DeploymentOutcome.SKIPPED)

        if descriptor.verify_mode is VerifyMode.OKLINK and self.verifier is None:
            raise ValueError(f"{descriptor.display_name} needs an OklinkVerifier to verify after deploying")

        print_step("Deployment Info:")
        print_info(f"Network: {network.identifier}")
        print_info(f"Verification: {descriptor.verify_mode.value}")
        if descriptor.oklink:
            print_info(f"Chain ID: {descriptor.oklink.chain_id}")

        cmd = self._build_command(network)
        print_step("Deploying contracts...")
        print("==== FORGE LOGS ====\n")
        result = self.runner.run(cmd)
        print("\n==== END OF LOGS ====\n")

        if not result.ok:
            print_error(f"Deployment to {descriptor.display_name} failed (exit code {result.returncode})")
            return DeploymentReport(network, DeploymentOutcome.FAILED, result)

        print_success(f"Successfully deployed to {descriptor.display_name} in {format_duration(result.duration)}")

        if descriptor.verify_mode is VerifyMode.OKLINK:
            # Deploy first, then verify via the OKLink plugin using broadcast data
            report = self.verifier.verify(descriptor.oklink)
            if not report.ok:
                print_warning(f"OKLink verification for {descriptor.display_name} did not complete")
                print_info(f"Retry later with: python3 script/deploy/deploy.py verify_{network.identifier}")

        return DeploymentReport(network, DeploymentOutcome.DEPLOYED, result)

    def _build_command(self, network: Network) -> List[str]:
        """Build the forge script command for a network's verification mode"""
        cmd = [
            "forge", "script", DEPLOY_SCRIPT,
            "--rpc-url", network.identifier,
            "--broadcast",
        ]
        mode = network.descriptor.verify_mode
        if mode is VerifyMode.VERIFY:
            cmd.append("--verify")
        elif mode is VerifyMode.NO_VERIFY or mode is VerifyMode.OKLINK:
            pass
        else:
            raise ValueError(f"Unhandled verification mode: {mode}")
        cmd.append("-vvv")
        cmd.extend(self.forge_args)
        return cmd
