"""
Validation Engine - Checks selections against a plan's configuration.

Produces human-readable blocking reasons. Blockers are data, not errors:
an estimate with blockers is still priced and stored, it just cannot be
finalised.
"""
from .catalog import CatalogReader
from .models import Selections, ValidationResult


class ValidationEngine:
    """
    Validates a plan id + selections pair.

    Checks, in order:
    1. The plan exists (otherwise a single "not found" blocker, nothing else)
    2. Each required option group has a value
    3. Each chosen option value is one the group allows
    4. Each selected add-on belongs to the plan

    Selection keys that are not option codes of the plan are ignored.
    """

    def __init__(self, catalog: CatalogReader):
        self.catalog = catalog

    def validate(self, plan_id: str, selections: Selections) -> ValidationResult:
        blockers: list[str] = []

        plan = self.catalog.get_plan(plan_id)
        if plan is None:
            return ValidationResult(is_valid=False, blockers=[f"Plan {plan_id} not found"])

        for group in self.catalog.list_option_groups(plan.id):
            selected = selections.get(group.code)

            if selected is None:
                if group.required:
                    blockers.append(f"Missing required field: {group.code}")
                continue

            if self.catalog.find_option_value(group.id, selected) is None:
                blockers.append(f'Invalid value "{selected}" for {group.code}')

        if selections.addons:
            valid_ids = {a.id for a in self.catalog.list_addons(plan.id, selections.addons)}
            invalid_ids = [addon_id for addon_id in selections.addons if addon_id not in valid_ids]
            if invalid_ids:
                blockers.append(f"Invalid add-on IDs for this plan: {', '.join(invalid_ids)}")

        return ValidationResult(is_valid=not blockers, blockers=blockers)
