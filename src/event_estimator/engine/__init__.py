"""Engine subpackage - catalog lookups, validation and pricing."""
from .catalog import CatalogReader
from .validation import ValidationEngine
from .pricing_engine import PricingEngine
from .models import Selections, Pricing, ValidationResult

__all__ = ['CatalogReader', 'ValidationEngine', 'PricingEngine', 'Selections', 'Pricing', 'ValidationResult']
