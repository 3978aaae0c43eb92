"""Tests for Telegram notification delivery and message formatting."""

from __future__ import annotations

import sys
import time
from pathlib import Path

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from intake.models import DIAGNOSIS, LEAD, Submission  # noqa: E402
from intake.services import notification_service  # noqa: E402
from intake.services.notification_service import (  # noqa: E402
    TelegramNotifier,
    format_diagnosis_message,
    format_lead_message,
)
from intake.storage import NotificationConfigStore  # noqa: E402


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = '{"ok":true}') -> None:
        self.status_code = status_code
        self.text = text


class FakeTelegramApi:
    """Stands in for ``requests.post`` and records every call."""

    def __init__(self) -> None:
        self.response = FakeResponse()
        self.error = None
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def telegram_api(monkeypatch) -> FakeTelegramApi:
    api = FakeTelegramApi()
    monkeypatch.setattr(notification_service.requests, "post", api.post)
    return api


@pytest.fixture
def config_store(tmp_path: Path) -> NotificationConfigStore:
    store = NotificationConfigStore(tmp_path / "config.json")
    store.initialize("123:secret", "-1001")
    return store


def test_send_posts_html_message(config_store, telegram_api):
    notifier = TelegramNotifier(config_store, api_base="https://tg.example/", background=False)

    assert notifier.send("<b>hello</b>") is True

    (url, kwargs), = telegram_api.calls
    assert url == "https://tg.example/bot123:secret/sendMessage"
    assert kwargs["json"] == {"chat_id": "-1001", "text": "<b>hello</b>", "parse_mode": "HTML"}
    assert kwargs["timeout"] == notifier.timeout


def test_send_skipped_when_not_configured(tmp_path: Path, telegram_api):
    store = NotificationConfigStore(tmp_path / "config.json")
    store.initialize()

    assert TelegramNotifier(store).send("hi") is False
    assert telegram_api.calls == []


def test_config_changes_apply_without_restart(config_store, telegram_api):
    notifier = TelegramNotifier(config_store, background=False)

    config_store.update(chat_id="")
    notifier.notify("first")
    config_store.update(chat_id="42")
    notifier.notify("second")

    assert [kwargs["json"]["text"] for _, kwargs in telegram_api.calls] == ["second"]


def test_transport_errors_are_swallowed(config_store, telegram_api, caplog):
    telegram_api.error = requests.ConnectionError("https://api.telegram.org/bot123:secret down")
    notifier = TelegramNotifier(config_store, background=False)

    notifier.notify("hi")

    assert "ConnectionError" in caplog.text
    assert "123:secret" not in caplog.text


def test_rejected_message_returns_false(config_store, telegram_api):
    telegram_api.response = FakeResponse(400, '{"ok":false}')

    assert TelegramNotifier(config_store).send("hi") is False


def test_background_notify_runs_off_thread(config_store, telegram_api):
    notifier = TelegramNotifier(config_store)

    notifier.notify("async")

    # give the daemon thread a chance to finish
    for _ in range(100):
        if telegram_api.calls:
            break
        time.sleep(0.01)
    assert telegram_api.calls[0][1]["json"]["text"] == "async"


def test_concurrent_sends_each_make_their_own_request(config_store, telegram_api):
    notifier = TelegramNotifier(config_store)

    for index in range(5):
        notifier.notify(f"message {index}")

    for _ in range(200):
        if len(telegram_api.calls) == 5:
            break
        time.sleep(0.01)
    sent = sorted(kwargs["json"]["text"] for _, kwargs in telegram_api.calls)
    assert sent == [f"message {index}" for index in range(5)]
    assert not hasattr(notifier, "session")


def test_lead_message_contains_fields_and_escapes_html():
    submission = Submission.from_payload(
        {"industry": "IT", "companyName": "A<B> & Co", "contactName": "Kim", "contactPhone": "010-0000-0000"},
        LEAD,
    )

    text = format_lead_message(submission)

    assert text.startswith("🔔 <b>새로운 정책자금 진단 신청</b>")
    assert "📌 업종: IT" in text
    assert "🏢 업체명: A&lt;B&gt; &amp; Co" in text
    assert "📍 지역: -" in text
    assert f"📅 접수시간: {submission.submitted_at}" in text


def test_diagnosis_message_lists_government_loans():
    submission = Submission.from_payload(
        {
            "employeeCount": 5,
            "revenue2023": 100,
            "revenue2024": 200,
            "creditScore": 850,
            "overdue": "없음",
            "govLoan": "있음",
            "govLoans": [{"institution": "중진공", "date": "2024-03", "amount": 5000}],
        },
        DIAGNOSIS,
    )

    text = format_diagnosis_message(submission)

    assert "👥 직원 수: 5명" in text
    assert "💵 매출(23/24/25): 100 / 200 / - 만원" in text
    assert "📋 대출내역:\n  1. 중진공 / 2024-03 / 5000만원\n" in text
    assert "💳 기타대출: 없음" in text


def test_diagnosis_message_omits_loan_list_without_government_loan():
    submission = Submission.from_payload({"govLoan": "없음", "otherLoans": "카드론"}, DIAGNOSIS)

    text = format_diagnosis_message(submission)

    assert "대출내역" not in text
    assert "💳 기타대출: 카드론" in text


def test_diagnosis_message_with_empty_loan_list():
    submission = Submission.from_payload({"govLoan": "있음", "govLoans": []}, DIAGNOSIS)

    assert "📋 대출내역:\n없음\n" in format_diagnosis_message(submission)
