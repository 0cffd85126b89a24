"""Email delivery through Flask-Mail."""

from __future__ import annotations

import logging
import smtplib

from flask import Flask
from flask_mail import Mail, Message
from markupsafe import escape

from .abstract_notifier import (
    DEFAULT_VERIFICATION_PATH,
    AbstractNotifier,
    build_verification_link,
)

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify Your Email - Lost & Found"

_VERIFICATION_TEXT = """\
Dear {username},

Thank you for signing up! To complete your registration, please verify your
email by opening this link:

{link}

If you didn't create this account, you can ignore this email.
"""

_VERIFICATION_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>Verify Your Email Address</h2>
  <p>Dear <strong>{username}</strong>,</p>
  <p>Thank you for signing up! To complete your registration, please verify
  your email by clicking the button below:</p>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{link}" style="display: inline-block; background-color: #007bff;
       color: white; padding: 12px 30px; text-decoration: none;
       border-radius: 5px; font-weight: bold;">Verify Email Address</a>
  </div>
  <p style="color: #666; font-size: 14px;">Or copy and paste this link in your browser:<br>
  <code style="background: #f0f0f0; padding: 5px; word-break: break-all;">{link}</code></p>
  <p style="color: #666; font-size: 12px;">If you didn't create this account,
  you can ignore this email.</p>
</div>
"""


class MailNotifier(AbstractNotifier):
    """Send verification mail with the app's Flask-Mail settings.

    Sends usually run on a worker thread, so each one pushes an application
    context for Flask-Mail to read ``MAIL_*`` from.
    """

    def __init__(
        self,
        app: Flask,
        mail: Mail,
        verification_path: str = DEFAULT_VERIFICATION_PATH,
    ):
        self.app = app
        self.mail = mail
        self.verification_path = verification_path

    def build_message(
        self, email: str, username: str, token: str, base_url: str
    ) -> Message:
        link = build_verification_link(base_url, token, self.verification_path)
        return Message(
            subject=VERIFICATION_SUBJECT,
            recipients=[email],
            body=_VERIFICATION_TEXT.format(username=username, link=link),
            html=_VERIFICATION_HTML.format(username=escape(username), link=escape(link)),
        )

    def send_verification(
        self, email: str, username: str, token: str, base_url: str
    ) -> bool:
        with self.app.app_context():
            message = self.build_message(email, username, token, base_url)
            try:
                self.mail.send(message)
            except (smtplib.SMTPException, OSError):
                logger.exception("Delivery of verification email to %s failed", email)
                return False

        logger.info("Verification email sent to %s", email)
        return True
