"""
Pricing Engine - Deterministic price breakdown for a plan and selections.

total = plan base price + selected add-ons of the plan + matched option deltas

Pricing is best-effort over whatever was selected: add-ons of other plans
and option values the plan does not define contribute nothing rather than
failing. Flagging them is the validation engine's job.
"""
from .catalog import CatalogReader
from .models import Selections, Pricing, PriceLine
from ..errors import PlanNotFoundError


class PricingEngine:
    """
    Core pricing engine over the plan catalog.

    Resolution order:
    1. Resolve the plan (hard failure if it does not exist)
    2. Start from the plan's base price
    3. Add the price of every selected add-on that belongs to the plan
    4. For every option group with a chosen value, add that value's delta
    """

    def __init__(self, catalog: CatalogReader):
        self.catalog = catalog

    def price(self, plan_id: str, selections: Selections) -> Pricing:
        """
        Price a selection set.

        Args:
            plan_id: Plan to price against
            selections: Chosen add-ons and option values

        Returns:
            Pricing with base, add-ons subtotal, total and itemised lines

        Raises:
            PlanNotFoundError: If the plan does not exist
        """
        plan = self.catalog.get_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)

        lines = [PriceLine("base", plan.id, plan.name, plan.base_price_cents)]

        addons_total = 0
        if selections.addons:
            for addon in self.catalog.list_addons(plan.id, selections.addons):
                addons_total += addon.price_cents
                lines.append(PriceLine("addon", addon.id, addon.name, addon.price_cents))

        options_total = 0
        for group in self.catalog.list_option_groups(plan.id):
            selected = selections.get(group.code)
            if selected is None:
                continue
            value = self.catalog.find_option_value(group.id, selected)
            if value is not None and value.price_cents:
                options_total += value.price_cents
                lines.append(PriceLine("option", group.code, value.value, value.price_cents))

        return Pricing(
            base=plan.base_price_cents,
            addons=addons_total,
            total=plan.base_price_cents + addons_total + options_total,
            currency=plan.currency,
            lines=lines,
        )
