"""
Event Estimator Package

Price estimates for event-hosting plans (venue, seating, catering, add-ons).
Validates selections against a plan's option groups and add-ons, computes a
deterministic price breakdown and routes finalised estimates to approval.
"""

__version__ = "1.0.0"
