"""Contact form submission.

Submissions are validated and acknowledged after a simulated delivery delay;
nothing is persisted.  The admin read path goes through the repository on
the ``contact-submissions`` collection.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime

from ellaia.contact.models import ContactForm, ContactStatus, ContactSubmission
from ellaia.repository.base import DataRepository, random_base36
from ellaia.repository.response import ApiResponse
from ellaia.shared.errors import InvalidInputError
from ellaia.shared.models import utcnow
from ellaia.shared.service import EntityService

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Mensagem enviada com sucesso! Entraremos em contacto em breve."
SUBMIT_KEY = "submit_contact"


def contact_id() -> str:
    return f"contact_{int(time.time() * 1000)}_{random_base36(9)}"


class ContactService(EntityService[ContactSubmission]):
    entity = "contact-submissions"
    model = ContactSubmission

    def __init__(
        self,
        repository: DataRepository,
        latency: float = 1.5,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        super().__init__(repository)
        self._latency = max(latency, 0.0)
        self._clock = clock

    async def submit(self, form: ContactForm) -> ApiResponse[ContactSubmission | None]:
        """Validate *form* and acknowledge it as a PENDING submission."""
        try:
            form.validate_submission()
        except InvalidInputError as exc:
            logger.info("Rejected contact form: %s", exc)
            return ApiResponse.fail(None, str(exc))

        with self._repository.loading.track(SUBMIT_KEY):
            submission = ContactSubmission(
                id=contact_id(),
                first_name=form.first_name.strip(),
                last_name=form.last_name.strip(),
                email=form.email.strip(),
                subject=form.subject.strip(),
                message=form.message.strip(),
                newsletter=form.newsletter,
                privacy=form.privacy,
                submitted_at=self._clock(),
                status=ContactStatus.PENDING,
            )
            await asyncio.sleep(self._latency)
        logger.debug("Contact submission %s accepted", submission.id)
        return ApiResponse.ok(submission, SUCCESS_MESSAGE)

    # ── Admin read path ──────────────────────────────────────────

    async def list_submissions(self) -> ApiResponse[list[ContactSubmission]]:
        return await self.list_all()

    async def get_submission(self, submission_id: str) -> ApiResponse[ContactSubmission | None]:
        return await self.get_by_id(submission_id)

    async def update_status(
        self, submission_id: str, status: ContactStatus
    ) -> ApiResponse[ContactSubmission | None]:
        return await self._update(submission_id, {"status": status.value})

    def is_loading(self, operation: str = "submit", record_id: str | None = None) -> bool:
        if operation == "submit" and record_id is None:
            return self._repository.is_loading(SUBMIT_KEY)
        return super().is_loading(operation, record_id)
