"""
Tests for the email outbox and its worker job
"""
from datetime import date, datetime, timezone

import pytest

from app.core.config import settings
from app.models.booking import Booking
from app.models.email_log import EmailLog
from app.services import email_service
from app.services.email_service import queue_email, process_pending_emails
from app.services.notification_service import format_date, render_status_email
from app.tasks.worker_jobs import process_email_queue


class TestQueueEmail:
    def test_sent_immediately(self, db_session, sent_emails):
        log = queue_email(db_session, "guest@example.com", "Hi", "Body", related_booking_id=7)

        assert log.status == "sent"
        assert log.attempts == 1
        assert log.sent_at is not None
        assert sent_emails == [{"to": "guest@example.com", "subject": "Hi", "body": "Body"}]

    def test_failure_is_recorded(self, db_session, broken_mail):
        log = queue_email(db_session, "guest@example.com", "Hi", "Body")

        assert log.status == "failed"
        assert log.last_error == "relay refused"
        assert db_session.get(EmailLog, log.id).status == "failed"


class TestProcessPendingEmails:
    def test_retries_failed(self, db_session, monkeypatch):
        def down(to, subject, body):
            raise OSError("connection refused")

        monkeypatch.setattr(email_service, "send_email", down)
        log = queue_email(db_session, "guest@example.com", "Hi", "Body")
        assert log.status == "failed"

        delivered = []
        monkeypatch.setattr(email_service, "send_email", lambda to, subject, body: delivered.append(to))
        result = process_pending_emails(db_session)

        assert result == {"processed": 1, "sent": 1, "failed": 0}
        assert delivered == ["guest@example.com"]
        assert db_session.get(EmailLog, log.id).status == "sent"
        assert db_session.get(EmailLog, log.id).attempts == 2

    def test_gives_up_after_max_attempts(self, db_session, broken_mail, monkeypatch):
        monkeypatch.setattr(settings, "EMAIL_MAX_ATTEMPTS", 2)
        queue_email(db_session, "guest@example.com", "Hi", "Body")

        assert process_pending_emails(db_session)["failed"] == 1
        assert process_pending_emails(db_session) == {"processed": 0, "sent": 0, "failed": 0}

    def test_sent_mail_is_not_resent(self, db_session, sent_emails):
        queue_email(db_session, "guest@example.com", "Hi", "Body")

        assert process_pending_emails(db_session)["processed"] == 0
        assert len(sent_emails) == 1


class TestWorkerJob:
    def test_runs_queue(self, session_factory, sent_emails):
        db = session_factory()
        db.add(EmailLog(id="e1", to_email="guest@example.com", subject="Hi", body="Body", status="queued", attempts=0))
        db.commit()
        db.close()

        assert process_email_queue(limit=10, session_factory=session_factory)["sent"] == 1

    def test_missing_tables_are_skipped(self, test_engine):
        from sqlalchemy.orm import sessionmaker

        # no create_all: the outbox table doesn't exist
        result = process_email_queue(session_factory=sessionmaker(bind=test_engine))

        assert result == {"skipped": True, "reason": "database_unavailable"}


class TestStatusTemplates:
    @pytest.fixture
    def booking(self):
        return Booking(
            id=1, name="Ana", email="ana@example.com", service_name="Deluxe Room",
            check_in_date=date(2025, 12, 1), check_out_date=date(2025, 12, 3),
        )

    def test_format_date(self):
        assert format_date(date(2025, 1, 9)) == "1/9/2025"

    def test_approved(self, booking):
        subject, body = render_status_email(booking, "approved")

        assert subject == "Your Booking Has Been Approved"
        assert body.startswith("Hello Ana,")
        assert "Deluxe Room from 12/1/2025 to 12/3/2025 has been APPROVED" in body

    def test_declined(self, booking):
        subject, body = render_status_email(booking, "declined")

        assert subject == "Your Booking Has Been Declined"
        assert "Deluxe Room has been declined" in body

    def test_no_template_for_pending(self, booking):
        with pytest.raises(ValueError):
            render_status_email(booking, "pending")


class TestBadRowInBatch:
    def test_bad_row_does_not_resend_good_ones(self, db_session, monkeypatch):
        delivered = []

        def fake_send(to, subject, body):
            if "\n" in to:
                raise ValueError("Header values may not contain linefeed or carriage return characters")
            delivered.append(to)

        monkeypatch.setattr(email_service, "send_email", fake_send)
        db_session.add_all([
            EmailLog(id="good", to_email="good@x.com", subject="Hi", body="Body", status="failed", attempts=1,
                     created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)),
            EmailLog(id="bad", to_email="bad@x.com\nBcc: y@z.com", subject="Hi", body="Body", status="queued", attempts=0,
                     created_at=datetime(2025, 1, 2, tzinfo=timezone.utc)),
        ])
        db_session.commit()

        for _ in range(3):
            process_pending_emails(db_session)

        assert delivered == ["good@x.com"]
        assert db_session.get(EmailLog, "good").status == "sent"
        bad = db_session.get(EmailLog, "bad")
        assert bad.status == "failed"
        assert bad.attempts == 3
        assert "linefeed" in bad.last_error

    def test_bad_row_reaches_max_attempts(self, db_session, monkeypatch):
        def fake_send(to, subject, body):
            raise ValueError("bad header")

        monkeypatch.setattr(email_service, "send_email", fake_send)
        monkeypatch.setattr(settings, "EMAIL_MAX_ATTEMPTS", 2)
        db_session.add(EmailLog(id="bad", to_email="bad@x.com", subject="Hi", body="Body", status="queued", attempts=0))
        db_session.commit()

        process_pending_emails(db_session)
        process_pending_emails(db_session)

        assert process_pending_emails(db_session)["processed"] == 0
        assert db_session.get(EmailLog, "bad").attempts == 2
