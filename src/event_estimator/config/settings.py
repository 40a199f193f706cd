"""
Centralized settings and path configuration for the event estimator.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    env_root = os.getenv('ESTIMATOR_PROJECT_ROOT')
    if env_root:
        return Path(env_root).resolve()
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return PACKAGE_ROOT.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Catalog seed CSVs (providers, plans, option groups/values, add-ons)
    seed_dir: Path

    # Output files
    build_report: Path

    # Estimate store
    database_url: str

    # Single demo employer until employer scoping exists
    employer_id: str = 'employer_demo'
    default_plan_id: Optional[str] = 'plan_a_standard'

    log_level: str = 'INFO'
    cors_origins: list[str] = field(default_factory=lambda: ['*'])

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment and the project structure."""
        load_dotenv()
        root = project_root or get_project_root()

        data_dir = root / '.data'
        default_db = f"sqlite:///{data_dir / 'estimates.db'}"

        origins = os.getenv('ESTIMATOR_CORS_ORIGINS', '*')

        return cls(
            project_root=root,
            seed_dir=Path(os.getenv('ESTIMATOR_SEED_DIR', PACKAGE_ROOT / 'data' / 'seed')),
            build_report=Path(os.getenv(
                'ESTIMATOR_BUILD_REPORT',
                PACKAGE_ROOT / 'data' / 'outputs' / 'build_report.json',
            )),
            database_url=os.getenv('ESTIMATOR_DATABASE_URL', default_db),
            employer_id=os.getenv('ESTIMATOR_EMPLOYER_ID', 'employer_demo'),
            default_plan_id=os.getenv('ESTIMATOR_DEFAULT_PLAN_ID', 'plan_a_standard') or None,
            log_level=os.getenv('ESTIMATOR_LOG_LEVEL', 'INFO').upper(),
            cors_origins=[o.strip() for o in origins.split(',') if o.strip()],
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
