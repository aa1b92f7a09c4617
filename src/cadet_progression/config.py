"""
config.py — Central settings for the Cadet Progression dashboards
=================================================================
All configuration is loaded from environment variables / .env file.
Copy .env.example → .env and adjust as needed.

The engine itself (catalog, evaluator, store) takes no configuration;
these settings drive the entry points: log level, demo seeding, which
cadet and batches the dashboards open on, and the instructor page gate.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env into os.environ (no-op if already set, safe to call multiple times)
load_dotenv(override=False)


# ─── Helpers ────────────────────────────────────────────────────────────────

def _is_placeholder(value: str) -> bool:
    """Return True if the value looks like an unfilled template placeholder."""
    return not value or "<" in value or value.startswith("your-") or value == "PLACEHOLDER"


# ─── Progression dashboards ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ProgressionConfig:
    seed_demo_data:    bool
    default_od_number: str
    default_batches:   tuple[str, ...]


# ─── Instructor gate ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InstructorAuthConfig:
    username: str
    password: str

    @property
    def is_configured(self) -> bool:
        return not _is_placeholder(self.username) and not _is_placeholder(self.password)


# ─── App-level settings ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class AppConfig:
    log_level: str


# ─── Master settings object ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    progression: ProgressionConfig
    instructor:  InstructorAuthConfig
    app:         AppConfig

    def status_summary(self) -> dict[str, str]:
        """Return a dict of setting → status badge for the UI."""
        def badge(ok: bool, on: str = "🟢 Enabled", off: str = "⚪ Disabled") -> str:
            return on if ok else off

        return {
            "Demo cohort":      badge(self.progression.seed_demo_data),
            "Instructor gate":  badge(self.instructor.is_configured,
                                      "🟢 Configured", "⚪ Not configured"),
            "Log level":        self.app.log_level,
        }


def get_settings() -> Settings:
    """Load all configuration from environment variables."""
    _str  = lambda k, d="": os.getenv(k, d).strip()
    _bool = lambda k, d=False: os.getenv(k, str(d)).lower() in ("1", "true", "yes")
    _list = lambda k, d="": tuple(p.strip() for p in os.getenv(k, d).split(",") if p.strip())

    return Settings(
        progression=ProgressionConfig(
            seed_demo_data    = _bool("SEED_DEMO_DATA", True),
            default_od_number = _str("DEFAULT_OD_NUMBER", "OD-2024-001"),
            default_batches   = _list("DEFAULT_BATCHES", "Batch-2024-A,Batch-2024-B"),
        ),
        instructor=InstructorAuthConfig(
            username = _str("INSTRUCTOR_USERNAME", "instructor"),
            password = _str("INSTRUCTOR_PASSWORD", "oaksip2025"),
        ),
        app=AppConfig(
            log_level = _str("LOG_LEVEL", "INFO").upper(),
        ),
    )
