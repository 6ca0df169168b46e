"""Demo data generators."""

from community_fees.generators.community import (
    DemoAccount,
    DemoDataGenerator,
    PaymentEntryGenerator,
)

__all__ = ["DemoAccount", "DemoDataGenerator", "PaymentEntryGenerator"]
