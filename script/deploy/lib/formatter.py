#!/usr/bin/env python3
"""
ERC-8004 Deployment Tool - Formatter Module

Provides consistent, Homebrew-style formatting for deployment output.
Designed to work well in both terminal and CI environments.
"""

import pathlib

# Define what gets imported with "from .formatter import *"
__all__ = [
    'print_section',
    'print_subsection',
    'print_step',
    'print_info',
    'print_success',
    'print_error',
    'print_warning',
    'print_command',
    'format_address',
    'format_command',
    'format_duration',
    'format_path'
]

class Formatter:
    # Color constants
    RESET = '\033[0m'
    BOLD = '\033[1m'
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'

    @staticmethod
    def print_section(title: str):
        """Print a main section header (blue, bold)"""
        print(f"{Formatter.BOLD}{Formatter.BLUE}==> {title}{Formatter.RESET}")

    @staticmethod
    def print_subsection(title: str):
        """Print a subsection header (cyan, bold)"""
        print(f"{Formatter.BOLD}{Formatter.CYAN} ==> {title}{Formatter.RESET}")

    @staticmethod
    def print_step(message: str):
        """Print a step message (bold)"""
        print(f"{Formatter.BOLD}  → {message}{Formatter.RESET}")

    @staticmethod
    def print_info(message: str):
        print(f"    • {message}")

    @staticmethod
    def print_success(message: str):
        print(f"    {Formatter.GREEN}✓ {message} {Formatter.RESET}")

    @staticmethod
    def print_error(message: str):
        print(f"    {Formatter.RED}✗ {message} {Formatter.RESET}")

    @staticmethod
    def print_warning(message: str):
        print(f"    {Formatter.YELLOW}⚠ {message} {Formatter.RESET}")

    @staticmethod
    def format_path(path, root_dir=None):
        """Format path to show relative to root directory when possible"""
        if root_dir is None:
            root_dir = pathlib.Path.cwd()
        try:
            return str(pathlib.Path(path).relative_to(pathlib.Path(root_dir)))
        except ValueError:
            return str(path)

    @staticmethod
    def format_command(cmd: list, config=None) -> str:
        """Join a command for display, replacing the private key and RPC URLs with their variable names"""
        debug_cmd = " ".join(str(arg) for arg in cmd)

        if config is not None:
            for name, value in config.secrets().items():
                debug_cmd = debug_cmd.replace(value, f"${name}")

        return debug_cmd

    @staticmethod
    def print_command(cmd: list, config=None):
        """Print a formatted command with secrets masked"""
        Formatter.print_info("Command")
        print(f"  {Formatter.format_command(cmd, config)}")

    @staticmethod
    def format_address(address: str) -> str:
        """Format truncated contract/account address as string"""
        return f"{Formatter.CYAN}{address[:6]}...{address[-4:]}{Formatter.RESET}"

    @staticmethod
    def format_duration(seconds: float) -> str:
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes, secs = divmod(int(seconds), 60)
        return f"{minutes}m{secs:02d}s"


# Standalone functions for import * compatibility
def print_section(title: str):
    Formatter.print_section(title)

def print_subsection(title: str):
    Formatter.print_subsection(title)

def print_step(message: str):
    Formatter.print_step(message)

def print_info(message: str):
    Formatter.print_info(message)

def print_success(message: str):
    Formatter.print_success(message)

def print_error(message: str):
    Formatter.print_error(message)

def print_warning(message: str):
    Formatter.print_warning(message)

def print_command(cmd: list, config=None):
    Formatter.print_command(cmd, config)

def format_address(address: str) -> str:
    return Formatter.format_address(address)

def format_command(cmd: list, config=None) -> str:
    return Formatter.format_command(cmd, config)

def format_duration(seconds: float) -> str:
    return Formatter.format_duration(seconds)

def format_path(path, root_dir=None):
    return Formatter.format_path(path, root_dir)
