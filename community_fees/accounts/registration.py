"""Address registration workflow.

A claim starts ``pending`` and moves once to ``approved`` or ``rejected``;
both are terminal.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime

from community_fees.access.permissions import Action, authorize
from community_fees.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidStateTransitionError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from community_fees.models.community import (
    ADDRESS_NUMBERS,
    FLOORS,
    STAFF_CLAIM,
    AddressRegistration,
    RegistrationStatus,
    Role,
    User,
    build_resident_id,
)
from community_fees.store.community import REGISTRATIONS, USERS, CommunityDataStore

logger = logging.getLogger(__name__)


class RegistrationWorkflow:
    """Submit, review and query address claims."""

    def __init__(self, store: CommunityDataStore) -> None:
        self.store = store

    # Submission
    def submit_unit_claim(
        self,
        user: User,
        address_number: str | None,
        floor: int | str | None,
        now: datetime | None = None,
    ) -> AddressRegistration:
        """Claim a unit. Both the address number and the floor are required.

        Raises
        ------
        ValidationError
            Address number or floor missing, or no such unit.
        DuplicateEntityError
            The user already claimed this unit.
        PermissionDeniedError
            The user is staff.
        """
        if not address_number or floor in (None, "", 0):
            raise ValidationError("Please select both the address number and the floor")
        try:
            floor_number = int(floor)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid floor {floor!r}") from exc
        if str(address_number) not in ADDRESS_NUMBERS or floor_number not in FLOORS:
            raise ValidationError(f"No such unit: No. {address_number}, {floor}F")
        return self._submit(user, build_resident_id(str(address_number), floor_number), now)

    def submit_staff_claim(self, user: User, now: datetime | None = None) -> AddressRegistration:
        """Ask to be promoted to gatekeeper."""
        return self._submit(user, STAFF_CLAIM, now)

    def _submit(self, user: User, target: str, now: datetime | None) -> AddressRegistration:
        if not authorize(user, Action.REGISTRATION_SUBMIT):
            raise PermissionDeniedError("Only resident accounts can submit registrations")
        if any(r.resident_id == target for r in self.for_user(user.user_id)):
            raise DuplicateEntityError("This address has already been registered")

        registration = AddressRegistration(
            registration_id=f"reg-{uuid.uuid4().hex}",
            user_id=user.user_id,
            resident_id=target,
            requested_at=now or datetime.now(),
        )
        self.store.put_registration(registration)
        try:
            self.store.sync(REGISTRATIONS)
        except StorageError:
            del self.store.registrations[registration.registration_id]
            raise
        logger.info("User %s submitted claim for %s", user.username, target)
        return registration

    # Review
    def approve(
        self, registration_id: str, approver: User, now: datetime | None = None
    ) -> AddressRegistration:
        """Approve a pending claim.

        A unit claim adds the unit to the claimant's addresses (once); a
        staff claim promotes the claimant to KEEP.
        """
        registration, claimant = self._reviewable(registration_id, approver)

        approved = replace(
            registration,
            status=RegistrationStatus.APPROVED,
            approved_by=approver.user_id,
            approved_at=now or datetime.now(),
        )
        if registration.is_staff_claim:
            updated_claimant = replace(claimant, role=Role.KEEP)
        elif registration.resident_id in claimant.registered_addresses:
            updated_claimant = claimant
        else:
            updated_claimant = replace(
                claimant,
                registered_addresses=[*claimant.registered_addresses, registration.resident_id],
            )

        self._commit(registration, approved, claimant, updated_claimant)
        logger.info(
            "%s approved claim %s of %s for %s",
            approver.username, registration_id, claimant.username, registration.resident_id,
        )
        return approved

    def reject(
        self, registration_id: str, approver: User, now: datetime | None = None
    ) -> AddressRegistration:
        registration, claimant = self._reviewable(registration_id, approver)
        rejected = replace(
            registration,
            status=RegistrationStatus.REJECTED,
            approved_by=approver.user_id,
            approved_at=now or datetime.now(),
        )
        self._commit(registration, rejected, claimant, claimant)
        logger.info("%s rejected claim %s", approver.username, registration_id)
        return rejected

    def _reviewable(self, registration_id: str, approver: User) -> tuple[AddressRegistration, User]:
        registration = self.store.get_registration(registration_id)
        if registration is None:
            raise EntityNotFoundError(f"Registration {registration_id} not found")

        action = (
            Action.REGISTRATION_REVIEW_STAFF
            if registration.is_staff_claim
            else Action.REGISTRATION_REVIEW
        )
        if not authorize(approver, action):
            raise PermissionDeniedError("You are not allowed to review this registration")
        if registration.status != RegistrationStatus.PENDING:
            raise InvalidStateTransitionError(
                f"Registration {registration_id} is already {registration.status.value}"
            )

        claimant = self.store.get_user(registration.user_id)
        if claimant is None:
            raise EntityNotFoundError(f"User {registration.user_id} not found")
        return registration, claimant

    def _commit(
        self,
        registration: AddressRegistration,
        updated: AddressRegistration,
        claimant: User,
        updated_claimant: User,
    ) -> None:
        self.store.registrations[registration.registration_id] = updated
        self.store.put_user(updated_claimant)
        try:
            self.store.sync(REGISTRATIONS, USERS)
        except StorageError:
            self.store.registrations[registration.registration_id] = registration
            self.store.put_user(claimant)
            raise

    # Queries
    def pending(self) -> list[AddressRegistration]:
        """Review queue, newest first."""
        return [r for r in self.all() if r.status == RegistrationStatus.PENDING]

    def all(self) -> list[AddressRegistration]:
        return sorted(self.store.registrations.values(), key=lambda r: r.requested_at, reverse=True)

    def for_user(self, user_id: str) -> list[AddressRegistration]:
        return [r for r in self.all() if r.user_id == user_id]
