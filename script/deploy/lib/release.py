#!/usr/bin/env python3
"""
ERC-8004 Release Manager

Handles the "all" deployment: every supported network, one after the other.
A network whose RPC URL is not configured is skipped; a failed deployment is
recorded and the remaining networks still run.
"""

import time
from typing import List, Sequence
from .formatter import *
from .networks import ALL_NETWORKS, Network
from .runner import DeploymentOutcome, DeploymentReport, DeploymentRunner


class ReleaseManager:
    """Manages multi-network deployment orchestration"""

    def __init__(self, deployment_runner: DeploymentRunner, networks: Sequence[Network] = ALL_NETWORKS):
        self.deployment_runner = deployment_runner
        self.networks = tuple(networks)
        self.reports: List[DeploymentReport] = []

    def deploy_all(self) -> bool:
        """
        Deploy to every network in order

        Returns:
            bool: True if no deployment failed (skipped networks do not count as failures)
        """
        print_section("Deploying to all testnets...")
        started = time.monotonic()
        self.reports = []
        announced_xlayer = False
        for network in self.networks:
            if network.descriptor.oklink and not announced_xlayer:
                print_section("Deploying to X Layer networks...")
                announced_xlayer = True
            self.reports.append(self.deployment_runner.deploy_network(network))

        self._print_summary(time.monotonic() - started)
        failed = [r for r in self.reports if r.failed]
        if failed:
            print_error(f"{len(failed)} of {len(self.reports)} deployments failed")
            return False
        print_success("All deployments complete!")
        return True

    def _print_summary(self, elapsed: float):
        """Print a formatted summary of the deployment results"""
        print_section("Deployment Summary")
        marks = {
            DeploymentOutcome.DEPLOYED: "✓",
            DeploymentOutcome.SKIPPED: "-",
            DeploymentOutcome.FAILED: "✗",
        }
        for report in self.reports:
            duration = f" ({format_duration(report.result.duration)})" if report.result else ""
            print_info(f"{marks[report.outcome]} {report.network.descriptor.display_name:<18} "
                       f"{report.outcome.value}{duration}")
        print_info(f"Total time: {format_duration(elapsed)}")
