"""Telegram notifications for new submissions.

Notifications are fire-and-forget: failures are logged and never reach the
request that triggered them.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Protocol

import requests

from intake.models import Submission
from intake.storage import NotificationConfigStore
from intake.utils.text import display_value

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"
DEFAULT_TIMEOUT_SECONDS = 10.0

TEST_MESSAGE = "🔔 <b>테스트 알림</b>\n\nONE PARTNER 관리자 알림이 정상적으로 연결되었습니다!"


class Notifier(Protocol):
    def notify(self, text: str) -> None:
        ...


class TelegramNotifier:
    """Sends messages through the Telegram Bot API using the stored config."""

    def __init__(
        self,
        config_store: NotificationConfigStore,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        background: bool = True,
    ) -> None:
        self.config_store = config_store
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.background = background

    def notify(self, text: str) -> None:
        """Queue ``text`` for delivery without waiting for the result."""
        if not self.background:
            self.send(text)
            return
        threading.Thread(target=self.send, args=(text,), name="telegram-notify", daemon=True).start()

    def send(self, text: str) -> bool:
        """Deliver ``text`` synchronously. Returns whether Telegram accepted it."""
        config = self.config_store.load()
        token = config.get("telegramBotToken")
        chat_id = config.get("telegramChatId")
        if not token or not chat_id:
            logger.debug("Telegram not configured; skipping notification")
            return False

        try:
            response = requests.post(
                f"{self.api_base}/bot{token}/sendMessage",
                json={"chat_id": chat_id, "text": text, "parse_mode": "HTML"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Telegram notification error: %s", exc.__class__.__name__)
            return False

        if response.status_code != 200:
            logger.warning("Telegram notification failed (%s): %s", response.status_code, response.text)
            return False

        logger.info("Telegram notification sent")
        return True


def format_lead_message(submission: Submission) -> str:
    fields = submission.extras
    return (
        "🔔 <b>새로운 정책자금 진단 신청</b>\n\n"
        f"📌 업종: {display_value(fields.get('industry'))}\n"
        f"📍 지역: {display_value(fields.get('region'))}\n"
        f"🏢 업체명: {display_value(fields.get('companyName'))}\n"
        f"💰 희망자금: {display_value(fields.get('fundingAmount'))}\n"
        f"👤 성함: {display_value(fields.get('contactName'))}\n"
        f"📞 연락처: {display_value(fields.get('contactPhone'))}\n"
        f"⏰ 통화시간: {display_value(fields.get('preferredTime'))}\n"
        f"📅 접수시간: {display_value(submission.submitted_at)}"
    )


def _format_gov_loans(loans: Any) -> str:
    if not isinstance(loans, list) or not loans:
        return "없음"

    lines: List[str] = []
    for index, loan in enumerate(loans, start=1):
        loan = loan if isinstance(loan, dict) else {}
        lines.append(
            f"  {index}. {display_value(loan.get('institution'))} / "
            f"{display_value(loan.get('date'))} / {display_value(loan.get('amount'))}만원"
        )
    return "\n".join(lines)


def format_diagnosis_message(submission: Submission) -> str:
    fields = submission.extras
    loan_details = ""
    if fields.get("govLoan") == "있음":
        loan_details = "📋 대출내역:\n" + _format_gov_loans(fields.get("govLoans")) + "\n"

    revenue = " / ".join(
        display_value(fields.get(key)) for key in ("revenue2023", "revenue2024", "revenue2025")
    )
    return (
        "🔔 <b>새로운 정밀 진단 서류 접수</b>\n\n"
        f"👥 직원 수: {display_value(fields.get('employeeCount'))}명\n"
        f"💵 매출(23/24/25): {revenue} 만원\n"
        f"📊 신용점수: {display_value(fields.get('creditScore'))}점\n"
        f"⚠️ 연체: {display_value(fields.get('overdue'))}\n"
        f"🏦 정부대출: {display_value(fields.get('govLoan'))}\n"
        f"{loan_details}"
        f"💳 기타대출: {display_value(fields.get('otherLoans'), default='없음')}\n"
        f"📅 접수시간: {display_value(submission.submitted_at)}"
    )


def dispatch_notification(notifier: Notifier, text: str) -> None:
    """Hand ``text`` to the notifier; a failing notifier never breaks the caller."""
    try:
        notifier.notify(text)
    except Exception:  # pragma: no cover
        logger.exception("Failed to dispatch notification")
