"""Contact form submissions."""

from ellaia.contact.models import ContactForm, ContactStatus, ContactSubmission
from ellaia.contact.services import SUCCESS_MESSAGE, ContactService

__all__ = [
    "SUCCESS_MESSAGE",
    "ContactForm",
    "ContactService",
    "ContactStatus",
    "ContactSubmission",
]
