"""Rich-based observer for tracing validation passes.

Prints recorded failures, traced rule evaluations and the start and end of a
Validator pass to a Rich console, and can summarize the failures seen so far
as a table.

Requires the 'rich' package: pip install rich
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fluent_validator.events import (
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)

if TYPE_CHECKING:
    from rich.console import Console
    from rich.table import Table

__all__ = ["RichTraceObserver"]


class RichTraceObserver(ValidationObserver):
    """Console trace of validation events.

    Attach it to a validator pass, or hand it to ``ValidationRule.traced``
    to follow individual rules.

    Example:
        observer = RichTraceObserver()
        result = (
            Validator.of(user, observers=[observer])
            .property("email", lambda u: u.email)
            .validate(string_rules.matches(EMAIL).traced("email", observer))
            .end()
            .complete()
        )
        observer.console.print(observer.build_summary())

    Requires:
        pip install rich
    """

    def __init__(
        self,
        console: Console | None = None,
        show_values: bool = True,
        max_value_length: int = 40,
    ) -> None:
        """Initialize the trace observer.

        Args:
            console: Rich Console instance. If None, creates a new one.
            show_values: Whether traced rule lines include the validated value.
            max_value_length: Values longer than this are truncated.
        """
        # Import Rich components here to make them optional
        from rich.console import Console

        self._console = console or Console()
        self._show_values = show_values
        self._max_value_length = max_value_length

        # (identifier, error_code) -> count
        self._failure_counts: dict[tuple[str, str], int] = {}

    @property
    def console(self) -> Console:
        return self._console

    @property
    def failure_counts(self) -> dict[tuple[str, str], int]:
        """Copy of the failure counts keyed by (identifier, error_code)."""
        return dict(self._failure_counts)

    def on_event(self, event: ValidationEvent) -> None:
        """Print one line for the event.

        Args:
            event: The validation event to handle.
        """
        from rich.markup import escape

        data = event.data

        if event.event_type == ValidationEventType.FAILURE_ADDED:
            identifier = str(data.get("identifier", ""))
            error_code = str(data.get("error_code", ""))
            key = (identifier, error_code)
            self._failure_counts[key] = self._failure_counts.get(key, 0) + 1
            self._console.print(
                f"[red]✗[/] [cyan]{escape(identifier)}[/] "
                f"[yellow]{escape(error_code)}[/] ({escape(str(data.get('severity', '')))})"
            )

        elif event.event_type == ValidationEventType.RULE_STARTED:
            self._console.print(
                f"[dim]→ {escape(str(data.get('rule_name', '')))}[/] "
                f"[cyan]{escape(str(data.get('identifier', '')))}[/]"
                f"{self._format_value(data)}"
            )

        elif event.event_type == ValidationEventType.RULE_COMPLETED:
            status = "[red]failed[/]" if data.get("has_error") else "[green]ok[/]"
            error_count = len(data.get("errors") or ())
            self._console.print(
                f"[dim]← {escape(str(data.get('rule_name', '')))}[/] "
                f"[cyan]{escape(str(data.get('identifier', '')))}[/] {status}"
                + (f" ({error_count} errors)" if error_count else "")
            )

        elif event.event_type == ValidationEventType.VALIDATION_STARTED:
            target = data.get("target")
            self._console.print(
                f"[bold blue]Validating[/] {escape(type(target).__name__)}"
            )

        elif event.event_type == ValidationEventType.VALIDATION_COMPLETED:
            failure_count = data.get("failure_count", 0)
            duration_ms = data.get("duration_ms", 0.0)
            if data.get("has_errors"):
                headline = f"[bold red]{failure_count} failures[/]"
            else:
                headline = "[bold green]valid[/]"
            self._console.print(f"{headline} in {duration_ms:.2f} ms")

    def _format_value(self, data: dict[str, object]) -> str:
        if not self._show_values or "value" not in data:
            return ""
        from rich.markup import escape

        text = repr(data["value"])
        if len(text) > self._max_value_length:
            # Truncate long values
            text = text[: self._max_value_length] + "..."
        return f" = {escape(text)}"

    def build_summary(self) -> Table:
        """Build a table of failures seen so far, most frequent first.

        Returns:
            Rich Table with one row per (identifier, error code).
        """
        from rich.table import Table

        table = Table(
            title="Validation Failures",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Identifier", style="cyan")
        table.add_column("Error Code", style="yellow")
        table.add_column("Count", justify="right", style="red")

        sorted_failures = sorted(
            self._failure_counts.items(),
            key=lambda x: x[1],
            reverse=True,
        )
        for (identifier, error_code), count in sorted_failures:
            table.add_row(identifier, error_code, f"{count:,}")

        if not sorted_failures:
            table.add_row("-", "No failures", "-")

        return table

    def reset(self) -> None:
        """Forget the failure counts."""
        self._failure_counts.clear()
