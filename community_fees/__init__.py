"""Residential community fee management: fee calculation, payment ledger,
role-based access and address registration."""

from community_fees.office import FeeOffice

__version__ = "0.1.0"

__all__ = ["FeeOffice", "__version__"]
