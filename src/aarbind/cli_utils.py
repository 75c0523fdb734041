"""CLI utility functions for aarbind.

This module provides common utilities used by the CLI including:
- Target (-target) and library list parsing
- Error handling and formatting
"""

import sys
from typing import List, Optional

from aarbind.config.arch_specs import get_arch_spec, supported_archs
from aarbind.errors import BindError, ValidationError


class TargetParser:
    """Parses -target values such as ``android`` or ``android/arm,android/arm64``."""

    @staticmethod
    def parse_targets(targets: Optional[str]) -> List[str]:
        """Parse a comma separated target list into architecture names.

        Args:
            targets: Target string; None or empty selects every architecture

        Returns:
            Go architecture names, in the given order, without duplicates

        Raises:
            ValidationError: If a target is not an Android target or names an
                unknown architecture
        """
        if not targets:
            return supported_archs()

        archs: List[str] = []
        for target in targets.split(","):
            target = target.strip()
            if not target:
                continue
            os_name, _, arch = target.partition("/")
            if os_name != "android":
                raise ValidationError(f"unsupported target {target!r}: only android targets can be bound")
            names = [arch] if arch else supported_archs()
            for name in names:
                if get_arch_spec(name) is None:
                    raise ValidationError(
                        f"unsupported Android architecture {name!r} in target {target!r}"
                        f" (supported: {', '.join(supported_archs())})"
                    )
                if name not in archs:
                    archs.append(name)

        if not archs:
            raise ValidationError(f"no architectures in target {targets!r}")
        return archs

    @staticmethod
    def parse_list(value: Optional[str]) -> List[str]:
        """Split a comma separated list, dropping empty items."""
        if not value:
            return []
        return [item.strip() for item in value.split(",") if item.strip()]


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Bind failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message."""
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message."""
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_bind_error(error: BindError) -> None:
        """Report a pipeline failure with the stage it happened in.

        Args:
            error: The BindError to handle
        """
        stage = error.stage or "bind"
        ErrorFormatter.print_error(f"Bind failed during {stage} stage", error.message)
        stderr = getattr(error, "stderr", "")
        if stderr:
            print(stderr.rstrip())
            print()
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Bind interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)
