"""
Mail delivery service.

Renders sign-in and sign-up mails from the Jinja2 templates shipped in
``affine_cloud/server/templates`` and sends them over SMTP. ``smtplib`` is
blocking, so every send runs in a worker thread.

Without ``MAILER_HOST`` the service runs in development mode: mails are
written to the log and reported as accepted.
"""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from affine_cloud.core.logging_config import get_logger
from affine_cloud.server.core.config import MailerConfig, settings

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


@dataclass
class MailResult:
    """Outcome of a send: which recipients the server took and which it refused."""

    accepted: List[str] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RenderedMail:
    subject: str
    html: str
    text: str


class MailService:
    """Send transactional mails."""

    SIGN_IN_SUBJECT = "Sign in to AFFiNE"
    SIGN_UP_SUBJECT = "Your AFFiNE account is waiting for you!"

    def __init__(self, config: Optional[MailerConfig] = None, templates_dir: Path = TEMPLATES_DIR) -> None:
        self.config = config or settings.mailer
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def ttl_minutes(self) -> int:
        return max(settings.magic_link_ttl_seconds // 60, 1)

    @property
    def configured(self) -> bool:
        return bool(self.config.host)

    def render(self, template: str, subject: str, context: Dict[str, object]) -> RenderedMail:
        """Render ``<template>.html`` and ``<template>.txt`` with ``context``."""
        try:
            html = self.env.get_template(f"{template}.html").render(subject=subject, **context)
            text = self.env.get_template(f"{template}.txt").render(subject=subject, **context)
        except TemplateError as exc:
            logger.error(f"Failed to render mail template {template}: {exc}")
            raise
        return RenderedMail(subject=subject, html=html, text=text)

    async def send_sign_in_mail(self, url: str, email: str) -> MailResult:
        mail = self.render("sign_in", self.SIGN_IN_SUBJECT, self._context(url, email))
        return await self.send(email, mail)

    async def send_sign_up_mail(self, url: str, email: str) -> MailResult:
        mail = self.render("sign_up", self.SIGN_UP_SUBJECT, self._context(url, email))
        return await self.send(email, mail)

    def _context(self, url: str, email: str) -> Dict[str, object]:
        return {"url": url, "email": email, "ttl_minutes": self.ttl_minutes}

    async def send(self, to: str, mail: RenderedMail) -> MailResult:
        """Deliver ``mail`` to ``to``.

        Args:
            to: Recipient address
            mail: Rendered subject and bodies

        Returns:
            MailResult listing accepted and rejected recipients
        """
        if not self.configured:
            logger.info(f"Mailer not configured, mail to {to} not sent: {mail.subject}\n{mail.text}")
            return MailResult(accepted=[to])

        message = self._build_message(to, mail)
        try:
            refused = await asyncio.to_thread(self._deliver, message)
        except smtplib.SMTPRecipientsRefused as exc:
            logger.warning(f"SMTP server refused recipients: {list(exc.recipients)}")
            return MailResult(rejected=[to])
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"Failed to send mail to {to}: {exc}")
            return MailResult(rejected=[to])

        if to in refused:
            return MailResult(rejected=[to])
        logger.debug(f"Mail sent to {to}: {mail.subject}")
        return MailResult(accepted=[to])

    def _build_message(self, to: str, mail: RenderedMail) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = mail.subject
        message["From"] = self.config.sender
        message["To"] = to
        message.set_content(mail.text)
        message.add_alternative(mail.html, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> Dict[str, object]:
        smtp_cls = smtplib.SMTP_SSL if self.config.use_tls else smtplib.SMTP
        with smtp_cls(self.config.host, self.config.port, timeout=30) as smtp:
            if not self.config.use_tls:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls(context=ssl.create_default_context())
                    smtp.ehlo()
            if self.config.user:
                smtp.login(self.config.user, self.config.password or "")
            return smtp.send_message(message)


def get_mail_service() -> MailService:
    """Dependency provider for the mail service."""
    return MailService()
