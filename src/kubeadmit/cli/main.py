#!/usr/bin/env python3
"""
KUBEADMIT CLI - Admission Checks from the Terminal
--------------------------------------------------
Primary interface: validates manifests on disk the way the API server
would before admitting them.

    kubeadmit check PATH          create-time validation of a file or tree
    kubeadmit update OLD NEW      update validation of NEW against OLD

Exit status is 1 when any document is rejected or unreadable.

Author: KubeAdmit Team
Date: 2026-10-17
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

# Rich library components for high-fidelity terminal UI
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    BarColumn,
    TaskProgressColumn
)

from kubeadmit.cli.formatter import KubeFormatter
from kubeadmit.core.engine import AdmissionEngine

VERSION = "0.1.0"

# Status and diagnostics go to stderr so JSON on stdout stays clean
console = Console(stderr=True)
logger = logging.getLogger("kubeadmit.cli")


class KubeAdmitCLI:
    """
    CLI wrapper that translates user commands into Engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubeadmit",
            description="KubeAdmit - Kubernetes admission validation for manifests",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = KubeFormatter(console)
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version=f"kubeadmit v{VERSION}")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        common = argparse.ArgumentParser(add_help=False)
        common.add_argument("--strict", action="store_true",
                            help="Treat documents of unsupported kinds as failures")
        common.add_argument("--no-defaults", action="store_true",
                            help="Validate manifests as written, without API-server defaulting")
        common.add_argument("--output", choices=("table", "json"), default="table",
                            help="Report format (default: table)")
        common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

        check_parser = subparsers.add_parser("check", parents=[common],
                                             help="🔍 Validate manifests as new objects")
        check_parser.add_argument("path", help="Path to a YAML file or directory")
        check_parser.add_argument("--ext", default=".yaml", help="File extension filter (default: .yaml)")
        check_parser.add_argument("--max-depth", type=int, default=10,
                                  help="Maximum directory depth to scan (default: 10)")

        update_parser = subparsers.add_parser("update", parents=[common],
                                              help="🔁 Validate NEW as an update of OLD")
        update_parser.add_argument("old", help="Manifest holding the current objects")
        update_parser.add_argument("new", help="Manifest holding the updated objects")
        update_parser.add_argument("--status", action="store_true",
                                   help="Apply status-update rules instead of spec-update rules")

    def print_header(self, subtitle: str):
        """Renders the KubeAdmit splash header with themed styling."""
        console.print(Panel.fit(
            f"[bold cyan]KubeAdmit v{VERSION}[/bold cyan]\n"
            "══════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _run_check(self, args: argparse.Namespace) -> int:
        input_path = Path(args.path).resolve()
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 1

        workspace = input_path if input_path.is_dir() else input_path.parent
        engine = AdmissionEngine(str(workspace), strict=args.strict, max_depth=args.max_depth,
                                 apply_defaults=not args.no_defaults)

        if input_path.is_file():
            reports = [engine.validate_file(input_path.name)]
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(bar_width=40),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                console=console,
                transient=True,
            ) as progress:
                task_id = progress.add_task("Validating manifests...", total=None)

                def advance(done: int, total: int):
                    progress.update(task_id, completed=done, total=total)

                reports = engine.scan_directory(extension=args.ext, progress_callback=advance)

            if not reports:
                console.print(f"\n[bold yellow]⚠️  No {args.ext} files found.[/bold yellow]")
                return 0

        return self._render(reports, engine, args)

    def _run_update(self, args: argparse.Namespace) -> int:
        old_path = Path(args.old).resolve()
        new_path = Path(args.new).resolve()
        for p, raw in ((old_path, args.old), (new_path, args.new)):
            if not p.is_file():
                console.print(f"[bold red]Error:[/bold red] File '{raw}' not found.")
                return 1

        # absolute paths pass through the workspace join unchanged
        engine = AdmissionEngine(str(new_path.parent), strict=args.strict,
                                 apply_defaults=not args.no_defaults)
        report = engine.validate_update(str(old_path), str(new_path), status=args.status)
        return self._render([report], engine, args)

    def _render(self, reports: List[Dict[str, Any]], engine: AdmissionEngine,
                args: argparse.Namespace) -> int:
        summary = engine.generate_summary(reports)
        if args.output == "json":
            self.formatter.print_json(reports, summary)
        else:
            for r in reports:
                if r.get("error"):
                    console.print(f"[bold red]Error in {r['file_path']}:[/bold red] {r['error']}")
                self.formatter.show_document_errors(r)
            self.formatter.print_final_table(reports)
            self.formatter.print_summary(summary)
        return 0 if all(r.get("success") for r in reports) else 1

    def run(self, argv: List[str] = None) -> int:
        """Primary routing entry point. Returns the process exit code."""
        argv = sys.argv[1:] if argv is None else argv
        if not argv:
            self.print_header("K8s Admission Validation")
            self.parser.print_help()
            return 0

        args = self.parser.parse_args(argv)
        if not args.command:
            self.parser.print_help()
            return 0

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        logger.debug(f"Running '{args.command}' with {vars(args)}")

        if args.output == "table":
            self.print_header("Admission Check" if args.command == "check" else "Update Check")
        if args.command == "check":
            return self._run_check(args)
        return self._run_update(args)


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeAdmitCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
