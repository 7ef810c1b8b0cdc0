"""Console script entry point with production wiring.

Sits at package level so composition can be wired into the CLI adapter
without the adapters layer importing the composition root.
"""

from __future__ import annotations

from .adapters.cli.main import main as cli_main
from .composition import build_production


def main() -> int:
    """Run ``postmark-client`` with production services and return its exit code."""
    return cli_main(services_factory=build_production)


__all__ = ["main"]
