"""Domain core for The Green Room venue commerce backend.

Pricing, eligibility rules, checkout metadata and the Stripe webhook
notification fan-out shared by the API package.
"""

__version__ = "0.1.0"
