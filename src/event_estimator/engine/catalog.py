"""
Catalog Reader - Read-only lookups over the plan catalog.

Loads the seed CSVs once and answers plan, option and add-on lookups for
the validation and pricing engines. The catalog does not change after
seeding, so the frames are kept in memory until reload_data() is called.
"""
import logging
from pathlib import Path
from typing import Iterable, Optional

from ..config.settings import get_settings
from ..data.build_catalog import load_seed_frames, check_catalog_integrity
from ..errors import CatalogError
from .models import Provider, Plan, OptionGroup, OptionValue, Addon


logger = logging.getLogger(__name__)


class CatalogReader:
    """
    Read-only accessor over providers, plans, option groups, option values
    and add-ons.

    All list results keep seed-file order, so validation messages come out
    in a stable order.
    """

    def __init__(self, seed_dir: Optional[Path] = None):
        """Load and check the seed catalog."""
        self.seed_dir = Path(seed_dir) if seed_dir else get_settings().seed_dir

        frames, errors = load_seed_frames(self.seed_dir)
        integrity_errors, warnings = check_catalog_integrity(frames)
        errors.extend(integrity_errors)

        if errors:
            raise CatalogError(
                f"Catalog at {self.seed_dir} failed {len(errors)} integrity check(s): {errors[0]}",
                errors=errors,
            )
        for warning in warnings:
            logger.warning("Catalog: %s", warning)

        self.providers = frames['providers']
        self.plans = frames['plans']
        self.option_groups = frames['option_groups']
        self.option_values = frames['option_values']
        self.addons = frames['addons']

        logger.info(
            "Loaded catalog from %s: %d providers, %d plans, %d option groups, %d add-ons",
            self.seed_dir, len(self.providers), len(self.plans),
            len(self.option_groups), len(self.addons),
        )

    def reload_data(self):
        """Reload the catalog from disk."""
        self.__init__(self.seed_dir)

    # Providers / plans

    def list_providers(self) -> list[Provider]:
        return [Provider.from_csv_row(row) for row in self.providers.to_dict('records')]

    def list_plans(self, provider_id: Optional[str] = None) -> list[Plan]:
        """List plans, optionally only those of one provider."""
        df = self.plans
        if provider_id is not None:
            df = df[df['provider_id'] == provider_id]
        return [Plan.from_csv_row(row) for row in df.to_dict('records')]

    def get_plan(self, plan_id: str) -> Optional[Plan]:
        match = self.plans[self.plans['id'] == plan_id]
        if match.empty:
            return None
        return Plan.from_csv_row(match.iloc[0].to_dict())

    def default_plan(self, preferred_id: Optional[str] = None) -> Optional[Plan]:
        """The preferred plan when it exists, else the first plan in the catalog."""
        if preferred_id:
            plan = self.get_plan(preferred_id)
            if plan:
                return plan
        if self.plans.empty:
            return None
        return Plan.from_csv_row(self.plans.iloc[0].to_dict())

    # Options

    def list_option_groups(self, plan_id: str) -> list[OptionGroup]:
        df = self.option_groups[self.option_groups['plan_id'] == plan_id]
        return [OptionGroup.from_csv_row(row) for row in df.to_dict('records')]

    def list_option_values(self, group_id: str) -> list[OptionValue]:
        df = self.option_values[self.option_values['option_group_id'] == group_id]
        return [OptionValue.from_csv_row(row) for row in df.to_dict('records')]

    def find_option_value(self, group_id: str, value: str) -> Optional[OptionValue]:
        """Resolve a selected token to its option value within one group."""
        match = self.option_values[
            (self.option_values['option_group_id'] == group_id) &
            (self.option_values['value'] == value)
        ]
        if match.empty:
            return None
        return OptionValue.from_csv_row(match.iloc[0].to_dict())

    # Add-ons

    def list_addons(self, plan_id: str, ids: Optional[Iterable[str]] = None) -> list[Addon]:
        """
        List the add-ons of a plan.

        When ids is given, only add-ons of this plan whose id is in ids are
        returned; unknown ids and ids of other plans are dropped.
        """
        df = self.addons[self.addons['plan_id'] == plan_id]
        if ids is not None:
            df = df[df['id'].isin(list(ids))]
        return [Addon.from_csv_row(row) for row in df.to_dict('records')]
