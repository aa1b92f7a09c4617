"""
demo_progression.py – Terminal demo for the Cadet Progression Engine

Run:
    python demo_progression.py

Loads the demo cohort, walks a new cadet through a short run of drills,
then shows the instructor-approved promotion and the batch statistics.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ── make src/ importable without installing the package ──────────────────────
sys.path.insert(0, str(Path(__file__).parent / "src"))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from cadet_progression.config import get_settings
from cadet_progression.evaluator import (
    build_nudges,
    get_progress_to_next_level,
    is_max_level,
)
from cadet_progression.models import CadetProgress, ContractViolation, NudgeLevel
from cadet_progression.seed_demo_data import build_demo_store
from cadet_progression.store import ProgressionStore

console = Console()

NUDGE_STYLE = {
    NudgeLevel.DANGER:  "bold red",
    NudgeLevel.WARNING: "bold yellow",
    NudgeLevel.INFO:    "bold cyan",
    NudgeLevel.SUCCESS: "bold green",
}


# ─── Display helpers ─────────────────────────────────────────────────────────

def _bar(pct: int, width: int = 20) -> str:
    filled = round(pct / 100 * width)
    return "[" + "█" * filled + "░" * (width - filled) + f"] {pct}%"


def show_cohort(store: ProgressionStore) -> None:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white on dark_blue", padding=(0, 1))
    table.add_column("OD number", style="cyan", no_wrap=True)
    table.add_column("Cadet")
    table.add_column("Batch", style="dim")
    table.add_column("Level", justify="center")
    table.add_column("Next level", min_width=28)

    for od_number, cadet in sorted(store.cadets.items()):
        level = store.catalog.get_level(cadet.current_level)
        if is_max_level(cadet):
            nxt = "[bold green]MAX[/bold green]"
        else:
            nxt = _bar(get_progress_to_next_level(cadet, store.catalog).percentage)
        table.add_row(od_number, cadet.name, cadet.batch, f"L{int(level.id)} {level.name}", nxt)

    console.print(Panel(table, title="[bold]Cohort[/bold]", border_style="blue"))


def show_cadet(store: ProgressionStore, cadet: CadetProgress) -> None:
    summary = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
    summary.add_column("Key",   style="bold cyan", no_wrap=True)
    summary.add_column("Value", style="white")
    summary.add_row("Level",      f"{int(cadet.current_level)} – {store.catalog.get_level(cadet.current_level).name}")
    summary.add_row("Drills",     str(cadet.drills_completed))
    summary.add_row("Accuracy",   f"{cadet.total_accuracy:.4g}%")
    summary.add_row("Violations", str(cadet.safety_violations))
    summary.add_row("Certified",  ", ".join(f"L{int(c)}" for c in sorted(cadet.certifications)) or "[dim]None[/dim]")
    if not is_max_level(cadet):
        nlp = get_progress_to_next_level(cadet, store.catalog)
        summary.add_row("Progress", _bar(nlp.percentage))
    console.print(Panel(summary, title=f"[bold]{cadet.name or cadet.od_number}[/bold]", border_style="magenta"))

    for nudge in build_nudges(cadet, store.catalog):
        style = NUDGE_STYLE[nudge.level]
        console.print(f"  [{style}]{nudge.title}[/{style}] {nudge.message.replace('**', '')}")


# ─── Main ────────────────────────────────────────────────────────────────────

def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.app.log_level, format="%(levelname)s %(name)s: %(message)s")

    console.print()
    console.print(Panel(
        "[bold]OAKSIP — Cadet Cognitive Progression[/bold]\n"
        "[dim]5-level artillery training mastery scale[/dim]",
        style="on dark_blue",
        expand=False,
    ))

    try:
        store = build_demo_store()
        show_cohort(store)

        od_number = "OD-2025-101"
        for accuracy, violation in [(68, False)] * 4 + [(74, True)] + [(82, False)] * 7:
            store.record_drill_completion(
                od_number, accuracy, violation, name="Cadet Demo Recruit", batch="Batch-2024-B",
            )
        cadet = store.get_cadet_progress(od_number)
        show_cadet(store, cadet)

        eligibility = store.check_level_eligibility(od_number, cadet.current_level + 1)
        if eligibility.eligible:
            cadet = store.promote_to_level(od_number, cadet.current_level + 1, approved_by="Maj. Demo")
            console.print("\n[bold green]Instructor approved the level-up.[/bold green]")
            show_cadet(store, cadet)
        else:
            console.print(f"\n[yellow]Not yet eligible:[/yellow] {'; '.join(eligibility.gaps)}")

        console.rule("[bold]Batch statistics[/bold]")
        for batch in store.batches():
            stats = store.get_batch_stats(batch)
            dist = "  ".join(f"L{int(lvl)}:{n}" for lvl, n in stats.level_distribution.items())
            console.print(f"  {batch:<14} {stats.cadet_count} cadets  {stats.avg_accuracy:5.1f}% avg  {dist}")
        console.print()

    except ContractViolation as e:
        console.print(f"\n[bold red]Contract violation:[/bold red] {e}")
        sys.exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
