"""Contact form submission models."""

from __future__ import annotations

from enum import StrEnum

from ellaia.comments.models import is_valid_email
from ellaia.shared.errors import InvalidInputError
from ellaia.shared.models import PatchModel, UtcDatetime, WireModel

MIN_MESSAGE_LENGTH = 10


class ContactStatus(StrEnum):
    """Handling state of a contact submission."""

    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    RESPONDED = "RESPONDED"


class ContactForm(PatchModel):
    """Fields a visitor fills in on the contact page."""

    first_name: str
    last_name: str
    email: str
    subject: str
    message: str
    newsletter: bool | None = None
    privacy: bool = False

    def validate_submission(self) -> None:
        """Raise InvalidInputError if the form cannot be submitted."""
        if not self.first_name.strip() or not self.last_name.strip():
            raise InvalidInputError("First and last name are required")
        if not is_valid_email(self.email.strip()):
            raise InvalidInputError("Invalid email format")
        if not self.subject.strip():
            raise InvalidInputError("Subject is required")
        if len(self.message.strip()) < MIN_MESSAGE_LENGTH:
            raise InvalidInputError(
                f"Message must be at least {MIN_MESSAGE_LENGTH} characters long"
            )
        if not self.privacy:
            raise InvalidInputError("The privacy policy must be accepted")


class ContactSubmission(WireModel):
    id: str
    first_name: str
    last_name: str
    email: str
    subject: str
    message: str
    newsletter: bool | None = None
    privacy: bool
    submitted_at: UtcDatetime
    status: ContactStatus = ContactStatus.PENDING
