#!/usr/bin/env python3
"""
Find Light — locate the RGB indicator light and show what it supports.

Resolves the configured hardware id (VID/PID) to a serial port the same way
a :class:`~rgb_light.session.LightSession` does at claim time.

Usage:
    python scripts/find_light.py                            # default config
    python scripts/find_light.py --config path/to/cfg.yaml  # custom config
    python scripts/find_light.py --registry                 # Windows registry walk
    python scripts/find_light.py --verbose                  # debug logging
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from rgb_light import (
    CAPABILITIES,
    LightConfig,
    LightError,
    PortLocator,
    RegistryBackend,
    SerialPortBackend,
    load_config,
    to_device_color,
)

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "config" / "light.yaml"

# ---------------------------------------------------------------------------
# Terminal helpers
# ---------------------------------------------------------------------------


class C:
    """ANSI color codes (no-op on non-TTY)."""

    if sys.stdout.isatty():
        BOLD = "\033[1m"
        DIM = "\033[2m"
        GREEN = "\033[32m"
        RED = "\033[31m"
        RESET = "\033[0m"
    else:
        BOLD = DIM = GREEN = RED = RESET = ""


def banner(text: str) -> None:
    print(f"\n{C.BOLD}{'═' * 60}")
    print(f"  {text}")
    print(f"{'═' * 60}{C.RESET}")


def info(text: str) -> None:
    print(f"  {C.GREEN}✓{C.RESET} {text}")


def error(text: str) -> None:
    print(f"  {C.RED}✗{C.RESET} {text}")


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def show_capabilities() -> None:
    banner("Capabilities")
    print(f"  Max lights: {CAPABILITIES.max_lights}")
    print(f"  Blink:      {'yes' if CAPABILITIES.blink else 'no'}")
    print(f"  Alarms:     {', '.join(a.name for a in sorted(CAPABILITIES.alarms))}")
    print("  Colors:")
    for color in sorted(CAPABILITIES.colors):
        print(f"    {color.name:8s} -> {to_device_color(color).name}")


def find(config: LightConfig, locator: PortLocator) -> int:
    banner(f"Searching for {config.hardware_id}")

    if config.port:
        info(f"Port pinned by config: {config.port}")
        return 0

    ports = locator.list_candidates(config.hardware_id)
    if not ports:
        error("No matching device found")
        return 1

    for idx, port in enumerate(ports, 1):
        marker = f"{C.DIM}(used){C.RESET}" if idx == 1 else ""
        info(f"{port} {marker}")
    if len(ports) > 1:
        print(f"  {C.DIM}Several matches: the first one is claimed.{C.RESET}")
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Locate the RGB indicator light by hardware id.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Path to YAML config file (default: {DEFAULT_CONFIG.name})",
    )
    parser.add_argument(
        "--registry",
        action="store_true",
        help="Walk the Windows device registry instead of pyserial's port list",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main() -> int:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config.exists() else LightConfig()
    except LightError as exc:
        print(f"{C.RED}✗{C.RESET} Config error: {exc}", file=sys.stderr)
        return 1

    show_capabilities()
    try:
        backend = RegistryBackend() if args.registry else SerialPortBackend()
        return find(config, PortLocator(backend))
    except ImportError:
        error("The registry walk needs Windows (winreg is unavailable)")
        return 1
    except (OSError, LightError) as exc:
        error(f"Device enumeration failed: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
