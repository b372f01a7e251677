"""x402 Message Wall — pay-to-post public message board."""

__version__ = "1.0.0"
