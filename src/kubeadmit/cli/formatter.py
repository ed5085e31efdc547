# src/kubeadmit/cli/formatter.py
import json
import sys
from typing import Any, Dict, List, TextIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Initialize the Rich console for high-quality terminal output
console = Console()

_STATUS_COLORS = {
    "ADMITTED": "green",
    "EMPTY": "dim",
    "UNSUPPORTED_KIND": "yellow",
    "REJECTED": "red",
    "DECODE_ERROR": "red",
    "FILE_NOT_FOUND": "red",
    "ENGINE_ERROR": "red",
}


class KubeFormatter:
    """
    KubeFormatter: The visual heart of the CLI.
    Renders per-document verdicts, field errors and the execution report.
    """

    def __init__(self, out: Console = console):
        self.console = out

    def show_document_errors(self, report: Dict[str, Any]):
        """
        One table per rejected document, listing every field error in the
        order it was detected.
        """
        for doc in report.get("documents", []):
            if doc.get("message"):
                self.console.print(f"[yellow]{report['file_path']}[doc {doc['index']}]:[/yellow] {doc['message']}")
            if not doc.get("error_details"):
                continue

            where = f"line {doc['line']}" if doc.get("line") else f"doc {doc['index']}"
            table = Table(show_header=True, header_style="bold red", expand=True)
            table.add_column("Field", style="cyan", no_wrap=True)
            table.add_column("Type", style="bold")
            table.add_column("Value", style="dim", overflow="fold")
            table.add_column("Detail", overflow="fold")
            for err in doc["error_details"]:
                table.add_row(err["field"], err["type"], err["value"], err["detail"])

            self.console.print(Panel(
                table,
                title=f"[bold red]{doc['kind']} '{doc['name']}'[/bold red] ({report['file_path']}, {where})",
                border_style="red",
            ))

    def print_final_table(self, reports: List[Dict[str, Any]]):
        """
        Builds the summary table shown at the very end of a run.
        """
        table = Table(title="KubeAdmit Admission Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Kind", style="white")
        table.add_column("Docs", justify="right")
        table.add_column("Errors", justify="right")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            status = r.get("status", "ENGINE_ERROR")
            color = _STATUS_COLORS.get(status, "red")
            table.add_row(
                str(r.get("file_path")),
                str(r.get("kind", "Unknown")),
                str(len(r.get("documents", []))),
                str(r.get("error_count", 0)),
                f"[{color}]{status}[/{color}]",
                "✅" if r.get("success") else "❌",
            )

        self.console.print(table)

    def print_summary(self, summary: Dict[str, Any]):
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:     {summary['total_files']}\n"
            f"Documents:       {summary['total_documents']}\n"
            f"Admitted:        [green]{summary['admitted']}[/green]\n"
            f"Rejected:        [red]{summary['rejected']}[/red]\n"
            f"Decode Errors:   [red]{summary['decode_errors']}[/red]\n"
            f"System Errors:   [red]{summary['system_errors']}[/red]\n"
            f"Field Errors:    {summary['total_errors']}",
            border_style="dim"
        ))

    @staticmethod
    def print_json(reports: List[Dict[str, Any]], summary: Dict[str, Any], stream: TextIO = None):
        """Machine-readable output; plain JSON with no terminal styling."""
        stream = stream or sys.stdout
        json.dump({"reports": reports, "summary": summary}, stream, indent=2, default=str)
        stream.write("\n")
