"""User accounts and address registrations."""

from community_fees.accounts.registration import RegistrationWorkflow
from community_fees.accounts.users import UserDirectory

__all__ = ["RegistrationWorkflow", "UserDirectory"]
