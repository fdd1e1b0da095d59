"""Tests for ContactService."""

import asyncio
import re
from datetime import UTC, datetime

import pytest
from ellaia.contact.models import ContactForm, ContactStatus
from ellaia.contact.services import SUCCESS_MESSAGE, ContactService
from ellaia.repository.base import DataRepository
from ellaia.storage.adapter import StoreAdapter
from ellaia.storage.backends import MemoryStorage

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _service(backend: MemoryStorage | None = None, latency: float = 0.0) -> ContactService:
    repository = DataRepository(StoreAdapter(backend or MemoryStorage()))
    return ContactService(repository, latency=latency, clock=lambda: NOW)


def _form(**overrides: object) -> ContactForm:
    fields: dict[str, object] = {
        "first_name": "Marta",
        "last_name": "Silva",
        "email": "marta@example.com",
        "subject": "Parcerias",
        "message": "Gostaria de propor um workshop de escrita.",
        "newsletter": True,
        "privacy": True,
    }
    fields.update(overrides)
    return ContactForm(**fields)  # type: ignore[arg-type]


class TestSubmit:
    def test_success(self):
        backend = MemoryStorage()
        response = asyncio.run(_service(backend).submit(_form()))
        submission = response.data

        assert response.success is True
        assert response.message == SUCCESS_MESSAGE
        assert re.fullmatch(r"contact_\d+_[0-9a-z]{9}", submission.id)
        assert submission.status == ContactStatus.PENDING
        assert submission.submitted_at == NOW
        assert submission.newsletter is True
        assert backend.keys() == []

    @pytest.mark.parametrize(
        ("overrides", "fragment"),
        [
            ({"first_name": " "}, "name"),
            ({"last_name": ""}, "name"),
            ({"email": "marta.example.com"}, "email"),
            ({"subject": ""}, "Subject"),
            ({"message": "Olá!"}, "at least 10"),
            ({"privacy": False}, "privacy"),
        ],
    )
    def test_invalid_forms_are_rejected(self, overrides: dict[str, object], fragment: str):
        response = asyncio.run(_service().submit(_form(**overrides)))
        assert response.success is False
        assert response.data is None
        assert fragment in response.message

    def test_loading_flag_during_submit(self):
        service = _service(latency=0.01)

        async def observe() -> tuple[bool, bool]:
            task = asyncio.create_task(service.submit(_form()))
            await asyncio.sleep(0)
            during = service.is_loading()
            await task
            return during, service.is_loading()

        assert asyncio.run(observe()) == (True, False)


class TestAdminReads:
    def test_list_submissions_empty(self):
        response = asyncio.run(_service().list_submissions())
        assert response.success is True
        assert response.data == []

    def test_update_status(self):
        service = _service()
        service.repository.store.write_collection(
            "contact-submissions",
            [
                {
                    "id": "contact_1_abc",
                    "firstName": "Marta",
                    "lastName": "Silva",
                    "email": "marta@example.com",
                    "subject": "Parcerias",
                    "message": "Gostaria de propor um workshop.",
                    "privacy": True,
                    "submittedAt": "2024-05-01T10:00:00Z",
                    "status": "PENDING",
                }
            ],
        )

        response = asyncio.run(service.update_status("contact_1_abc", ContactStatus.RESPONDED))

        assert response.data.status == ContactStatus.RESPONDED
        fetched = asyncio.run(service.get_submission("contact_1_abc"))
        assert fetched.data.status == ContactStatus.RESPONDED
