"""Render session metrics from a stats snapshot JSON file."""

from __future__ import annotations

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from session_analysis.dto import DashboardPreferences
from session_analysis.engine import analyze_session
from session_analysis.snapshot import LoadoutInput, SessionInput, WeaponInput

from overlay.engine_config import get_engine_config
from overlay.preferences import load_preferences
from overlay.services import get_settings_store


class Command(BaseCommand):
    """Print pinned (or all) metrics for a snapshot file."""

    help = "Render the pinned session metrics (or the full catalog) for a stats snapshot JSON file."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("snapshot", help="Path to a stats snapshot JSON file.")
        parser.add_argument(
            "--markup",
            action="store_true",
            help="Apply the markup multiplier to loot value.",
        )
        parser.add_argument(
            "--expenses",
            action="store_true",
            help="Add the additional-expense share to total spend.",
        )
        parser.add_argument(
            "--uses-per-minute",
            type=float,
            default=None,
            help="Weapon firing rate; selects the rate-based DPS/DPP formulas.",
        )
        parser.add_argument(
            "--all",
            action="store_true",
            help="Render every catalog metric grouped by category.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        path = Path(options["snapshot"])
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CommandError(f"Could not read snapshot file {path}: {exc}") from exc
        except ValueError as exc:
            raise CommandError(f"Snapshot file {path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise CommandError(f"Snapshot file {path} must contain a JSON object.")

        engine_config = get_engine_config()
        stored = load_preferences(get_settings_store(), default_pinned=engine_config.default_pinned)
        preferences = DashboardPreferences(
            pinned=stored.pinned,
            apply_markup=options["markup"],
            apply_additional_expenses=options["expenses"],
        )

        rate = options["uses_per_minute"]
        loadout = LoadoutInput(weapon=WeaponInput(uses_per_minute=rate)) if rate is not None else None

        # A snapshot file may hold bare stats or a {session, stats} envelope.
        stats = payload.get("stats", payload)
        session_payload = payload.get("session")
        session = SessionInput.from_payload(
            session_payload if isinstance(session_payload, dict) else None,
            stats=stats if isinstance(stats, dict) else None,
        )
        dashboard = analyze_session(
            session,
            loadout=loadout,
            preferences=preferences,
            config=engine_config.adjustments,
        )

        if options["all"]:
            for section in dashboard.sections:
                self.stdout.write(f"[{section.category}]")
                for metric in section.metrics:
                    self.stdout.write(f"{metric.label}: {metric.value}")
        else:
            for metric in dashboard.pinned:
                self.stdout.write(f"{metric.label}: {metric.value}")
        return None
