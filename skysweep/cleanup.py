"""
Skysweep Cleanup Run

File Purpose: Sweep each selected category and delete records older than the retention window
Primary Functions/Classes: CleanupRunner, render_summary
Inputs and Outputs (I/O): RecordStore pages in, delete calls and console output out

For each category the runner follows the listRecords cursor until it comes back
empty. A page that cannot be fetched aborts the whole run (ListError
propagates); a record that cannot be deleted is reported and the sweep moves on.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from rich.table import Table

from .client import RecordStore
from .deletion import DeletionManager, record_age, should_delete
from .exceptions import DeleteError
from .models import (
    Category,
    CategoryResult,
    Record,
    RunSummary,
    Session,
    Settings,
    console,
)

logger = logging.getLogger(__name__)


class CleanupRunner:
    """Runs one retention sweep over the selected categories."""

    def __init__(
        self,
        store: RecordStore,
        settings: Settings,
        session: Session,
        categories: Iterable[Category],
        now: Optional[datetime] = None,
        dry_run: bool = False,
    ):
        self.store = store
        self.settings = settings
        self.session = session
        self.categories: List[Category] = list(categories)
        self.now = now
        self.dry_run = dry_run
        self.deleter = DeletionManager(store, session, dry_run=dry_run)

    def run(self) -> RunSummary:
        """Sweep every category in order. ListError aborts the remaining categories."""
        now = self.now or datetime.now(timezone.utc)
        summary = RunSummary(dry_run=self.dry_run)
        for category in self.categories:
            summary.results.append(self.run_category(category, now=now))
        return summary

    def run_category(
        self, category: Category, now: Optional[datetime] = None
    ) -> CategoryResult:
        now = now or self.now or datetime.now(timezone.utc)
        result = CategoryResult(category=category)
        cursor = ""

        while True:
            page = self.store.list_records(self.session, category, cursor)
            result.pages += 1
            result.seen += len(page.records)
            logger.debug(
                "%s page %d: %d records, next cursor %r",
                category.plural,
                result.pages,
                len(page.records),
                page.cursor,
            )

            for record in page.records:
                self._process_record(record, category, result, now)

            if page.is_last:
                break
            cursor = page.cursor

        self._print_category_totals(result)
        return result

    def _process_record(
        self, record: Record, category: Category, result: CategoryResult, now: datetime
    ) -> None:
        if record_age(record, now) is None:
            result.unparseable += 1
            logger.warning(
                "Keeping %s with unparseable createdAt %r: %s",
                category.value,
                record.created_at,
                record.uri,
            )
            return

        if not should_delete(record, self.settings.day_count, now):
            return

        try:
            self.deleter.delete(record, category)
        except DeleteError as e:
            result.failed += 1
            console.print(
                str(e), style="red", markup=False, highlight=False, soft_wrap=True
            )
            return

        result.deleted += 1
        verb = "Would delete" if self.dry_run else "Deleted"
        console.print(
            f"{verb} {category.value}: {record.uri}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    def _print_category_totals(self, result: CategoryResult) -> None:
        plural = result.category.plural
        if result.deleted == 0:
            console.print(f"No {plural} were deleted.")
        elif self.dry_run:
            console.print(f"Total {plural} that would be deleted: {result.deleted}")
        else:
            console.print(f"Total {plural} deleted: {result.deleted}")
        console.print(
            f"Total {plural} skipped (newer than {self.settings.day_count} days): "
            f"{result.skipped}"
        )
        if result.unparseable:
            console.print(
                f"[yellow]{result.unparseable} {plural} kept because their "
                f"creation date could not be read[/]"
            )


def render_summary(summary: RunSummary) -> Table:
    """Build a rich table of per-category counters."""
    title = "Sweep Summary (dry run)" if summary.dry_run else "Sweep Summary"
    table = Table(title=title, show_header=True)
    table.add_column("Category", style="bold")
    table.add_column("Seen", justify="right")
    table.add_column("Deleted", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="dim")

    for result in summary.results:
        table.add_row(
            result.category.plural,
            str(result.seen),
            str(result.deleted),
            str(result.failed),
            str(result.skipped),
        )

    if len(summary.results) > 1:
        table.add_row(
            "total",
            str(summary.total_seen),
            str(summary.total_deleted),
            str(summary.total_failed),
            str(summary.total_seen - summary.total_deleted),
            style="bold",
        )
    return table
