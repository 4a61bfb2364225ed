"""
Unit tests for the password recovery service.

Tests:
- Code format and expiry window
- No record for unknown emails
- Single use, expiry and wrong-code rejection
- All-or-nothing consumption
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from app.core import otp
from app.core.exceptions import InternalError, InvalidOrExpiredOTP
from app.crud import password_reset as reset_crud
from app.crud import user as user_crud
from app.models.password_reset import PasswordReset
from app.models.user import Role


@pytest.fixture
def account(db_session, hasher):
    return user_crud.create(db_session, "a@x.com", hasher.hash("secret1"), Role.JOB_SEEKER)


class TestCodeGeneration:

    def test_code_is_six_digits_in_range(self):
        for _ in range(200):
            code = otp.generate_otp_code()
            assert len(code) == 6
            assert code.isdigit()
            assert 100000 <= int(code) <= 999999

    def test_expiry_is_ten_minutes_out(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)

        assert otp.otp_expiry(now) == now + timedelta(minutes=10)


class TestRequestPasswordReset:

    def test_unknown_email_creates_nothing(self, db_session):
        assert otp.request_password_reset(db_session, "nobody@x.com") is None
        assert db_session.query(PasswordReset).count() == 0

    def test_known_email_creates_record(self, db_session, account):
        record = otp.request_password_reset(db_session, "a@x.com")

        assert record is not None
        assert record.user_id == account.id
        assert record.is_used is False
        assert len(record.otp_code) == 6

    def test_earlier_codes_stay_valid(self, db_session, account, hasher):
        first = otp.request_password_reset(db_session, "a@x.com")
        otp.request_password_reset(db_session, "a@x.com")

        assert len(reset_crud.list_for_user(db_session, account.id)) == 2

        otp.consume_password_reset(db_session, "a@x.com", first.otp_code, "newpass1", hasher)
        db_session.refresh(account)
        assert hasher.verify("newpass1", account.hashed_password)


class TestConsumePasswordReset:

    def test_consume_updates_password_and_marks_used(self, db_session, account, hasher):
        record = otp.request_password_reset(db_session, "a@x.com")

        otp.consume_password_reset(db_session, "a@x.com", record.otp_code, "newpass1", hasher)

        db_session.refresh(account)
        db_session.refresh(record)
        assert hasher.verify("newpass1", account.hashed_password)
        assert not hasher.verify("secret1", account.hashed_password)
        assert record.is_used is True

    def test_second_consume_fails(self, db_session, account, hasher):
        record = otp.request_password_reset(db_session, "a@x.com")
        otp.consume_password_reset(db_session, "a@x.com", record.otp_code, "newpass1", hasher)

        with pytest.raises(InvalidOrExpiredOTP):
            otp.consume_password_reset(db_session, "a@x.com", record.otp_code, "newpass2", hasher)

        db_session.refresh(account)
        assert hasher.verify("newpass1", account.hashed_password)

    def test_expired_code_fails(self, db_session, account, hasher):
        issued_at = datetime.now(timezone.utc) - timedelta(minutes=11)
        record = otp.request_password_reset(db_session, "a@x.com", now=issued_at)

        with pytest.raises(InvalidOrExpiredOTP):
            otp.consume_password_reset(db_session, "a@x.com", record.otp_code, "newpass1", hasher)

        db_session.refresh(record)
        assert record.is_used is False

    def test_wrong_code_fails(self, db_session, account, hasher):
        record = otp.request_password_reset(db_session, "a@x.com")
        wrong = "100000" if record.otp_code != "100000" else "100001"

        with pytest.raises(InvalidOrExpiredOTP):
            otp.consume_password_reset(db_session, "a@x.com", wrong, "newpass1", hasher)

    def test_unknown_email_fails_same_way(self, db_session, hasher):
        with pytest.raises(InvalidOrExpiredOTP):
            otp.consume_password_reset(db_session, "nobody@x.com", "123456", "newpass1", hasher)

    def test_code_of_other_user_fails(self, db_session, account, hasher):
        user_crud.create(db_session, "b@x.com", hasher.hash("secret1"), Role.SHOP_OWNER)
        record = otp.request_password_reset(db_session, "a@x.com")

        with pytest.raises(InvalidOrExpiredOTP):
            otp.consume_password_reset(db_session, "b@x.com", record.otp_code, "newpass1", hasher)

    def test_store_failure_rolls_back_both_writes(self, db_session, account, hasher, monkeypatch):
        """Neither the password nor the used flag change when the commit fails"""
        record = otp.request_password_reset(db_session, "a@x.com")
        code = record.otp_code

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("database unavailable"))

        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(InternalError):
            otp.consume_password_reset(db_session, "a@x.com", code, "newpass1", hasher)

        monkeypatch.undo()

        db_session.refresh(account)
        db_session.refresh(record)
        assert hasher.verify("secret1", account.hashed_password)
        assert record.is_used is False

        # The same code still works once the store recovers
        otp.consume_password_reset(db_session, "a@x.com", code, "newpass1", hasher)
        db_session.refresh(account)
        assert hasher.verify("newpass1", account.hashed_password)

    def test_concurrently_consumed_code_fails(self, db_session, account, hasher, monkeypatch):
        """If another request marks the code used first, nothing is written"""
        record = otp.request_password_reset(db_session, "a@x.com")
        monkeypatch.setattr(reset_crud, "mark_used", lambda db, reset_id: False)

        with pytest.raises(InvalidOrExpiredOTP):
            otp.consume_password_reset(db_session, "a@x.com", record.otp_code, "newpass1", hasher)

        db_session.refresh(account)
        assert hasher.verify("secret1", account.hashed_password)
