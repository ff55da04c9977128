import pytest

from participium.core.errors import BadRequestError, ForbiddenError, UnprocessableEntityError
from participium.models.user import Role
from participium.repositories.notification_repository import get_notification_repository
from participium.services.internal_note_service import get_internal_note_service
from participium.services.message_service import get_message_service
from participium.services.report_service import get_report_service


def _notifications(user, kind):
    return [n for n in get_notification_repository().find_by_user(user["id"]) if n["type"] == kind]


class TestMessages:

    def test_citizen_message_notifies_officer(self, assigned_report, citizen, technical):
        message = get_message_service().send_message(assigned_report["id"], citizen["id"], "  Any news?  ")
        assert message["content"] == "Any news?"
        assert message["sender_name"] == "Mario Rossi"

        received = _notifications(technical, "MESSAGE_RECEIVED")
        assert received[0]["message"] == "Mario Rossi has sent you a message regarding your report"

    def test_staff_message_notifies_citizen_with_role_label(self, assigned_report, citizen, technical):
        get_message_service().send_message(assigned_report["id"], technical["id"], "We are on it")
        received = _notifications(citizen, "MESSAGE_RECEIVED")
        assert received[0]["message"].startswith("Luca Bianchi (Technical)")

    def test_citizen_message_goes_to_external_maintainer(self, assigned_report, citizen, technical, external_setup):
        company, maintainer = external_setup
        get_report_service().assign_external(assigned_report["id"], technical["id"], company["id"], maintainer["id"])

        get_message_service().send_message(assigned_report["id"], citizen["id"], "Thanks")
        assert len(_notifications(maintainer, "MESSAGE_RECEIVED")) == 1
        assert _notifications(technical, "MESSAGE_RECEIVED") == []

    def test_messages_are_listed_oldest_first(self, assigned_report, citizen, technical):
        service = get_message_service()
        service.send_message(assigned_report["id"], citizen["id"], "first")
        service.send_message(assigned_report["id"], technical["id"], "second")

        contents = [m["content"] for m in service.get_messages(assigned_report["id"], citizen["id"])]
        # approval wrote the first, automatic, message
        assert contents[-2:] == ["first", "second"]
        assert len(contents) == 3

    def test_other_citizen_is_forbidden(self, assigned_report, make_user):
        stranger = make_user(Role.CITIZEN)
        with pytest.raises(ForbiddenError, match="own reports"):
            get_message_service().send_message(assigned_report["id"], stranger["id"], "hello")

    def test_unassigned_staff_is_forbidden(self, assigned_report, make_user):
        other = make_user(Role.INFRASTRUCTURES)
        with pytest.raises(ForbiddenError, match="not assigned"):
            get_message_service().get_messages(assigned_report["id"], other["id"])

    def test_content_rules(self, assigned_report, citizen):
        service = get_message_service()
        with pytest.raises(BadRequestError):
            service.send_message(assigned_report["id"], citizen["id"], "   ")
        with pytest.raises(UnprocessableEntityError):
            service.send_message(assigned_report["id"], citizen["id"], "x" * 2001)


class TestInternalNotes:

    def test_officer_and_maintainer_share_notes(self, assigned_report, technical, external_setup):
        company, maintainer = external_setup
        get_report_service().assign_external(assigned_report["id"], technical["id"], company["id"], maintainer["id"])
        service = get_internal_note_service()

        note = service.create_note(assigned_report["id"], technical["id"], "Check the fuse box")
        assert note["author_role"] == ["LOCAL_PUBLIC_SERVICES"]
        assert len(_notifications(maintainer, "INTERNAL_NOTE_ADDED")) == 1

        service.create_note(assigned_report["id"], maintainer["id"], "Fuse replaced")
        assert len(_notifications(technical, "INTERNAL_NOTE_ADDED")) == 1

        notes = service.get_notes(assigned_report["id"], maintainer["id"])
        assert [n["content"] for n in notes] == ["Check the fuse box", "Fuse replaced"]

    def test_officer_alone_can_write_notes(self, assigned_report, technical):
        note = get_internal_note_service().create_note(assigned_report["id"], technical["id"], "Waiting for parts")
        assert note["author_name"] == "Luca Bianchi (Technical)"

    def test_citizen_cannot_read_notes(self, assigned_report, citizen):
        with pytest.raises(ForbiddenError):
            get_internal_note_service().get_notes(assigned_report["id"], citizen["id"])

    def test_unassigned_staff_cannot_write(self, assigned_report, make_user):
        other = make_user(Role.LOCAL_PUBLIC_SERVICES)
        with pytest.raises(ForbiddenError):
            get_internal_note_service().create_note(assigned_report["id"], other["id"], "hi")
