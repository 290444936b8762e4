"""
SMTP delivery for the daily digest email.
"""

import html
import os
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate
from typing import Optional

from utils.log import get_logger

logger = get_logger(__name__)

DIGEST_SUBJECT = "Active Tasks - Daily Summary"


class DigestDelivery:
    """Sends digest emails through an SMTP relay over STARTTLS"""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
    ):
        """
        Initialize SMTP delivery

        Environment variables (if params not provided):
        - SMTP_HOST: SMTP server hostname (default: smtp.gmail.com)
        - SMTP_PORT: SMTP server port (default: 587)
        - SMTP_USER: SMTP username
        - SMTP_PASSWORD: SMTP password (an app password for Gmail)
        - SMTP_FROM_EMAIL: From address (default: SMTP_USER)
        - SMTP_FROM_NAME: From display name
        """
        self.smtp_host = smtp_host or os.getenv("SMTP_HOST", "smtp.gmail.com")
        self.smtp_port = smtp_port or int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = smtp_user or os.getenv("SMTP_USER")
        self.smtp_password = smtp_password or os.getenv("SMTP_PASSWORD")
        self.from_email = from_email or os.getenv("SMTP_FROM_EMAIL", self.smtp_user)
        self.from_name = from_name or os.getenv("SMTP_FROM_NAME", "Tasks")

        self.enabled = all([self.smtp_host, self.smtp_user, self.smtp_password, self.from_email])
        if not self.enabled:
            logger.warning("SMTP not fully configured. Set SMTP_* environment variables.")

    def build_message(self, to_email: str, subject: str, content: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        msg["Date"] = formatdate(localtime=True)

        # Plaintext part first so HTML-capable clients prefer the last one
        msg.attach(MIMEText(html_to_plaintext(content), "plain", "utf-8"))
        msg.attach(MIMEText(content, "html", "utf-8"))
        return msg

    def send_digest(self, to_email: str, content: str, subject: str = DIGEST_SUBJECT) -> bool:
        """
        Send a digest email

        Args:
            to_email: Recipient email address
            content: HTML body
            subject: Email subject

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.enabled:
            logger.error("SMTP delivery not enabled. Configure SMTP_* environment variables.")
            return False

        try:
            msg = self.build_message(to_email, subject, content)

            logger.info("Connecting to %s:%s", self.smtp_host, self.smtp_port)
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            logger.info("Digest sent to %s", to_email)
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.exception("Failed to send digest: %s", e)
            return False


def html_to_plaintext(content: str) -> str:
    """Rough HTML to text conversion for the alternative part"""
    text = re.sub(r"<style[^>]*>.*?</style>", "", content, flags=re.DOTALL)
    text = re.sub(r"<br\s*/?>", "\n", text)
    text = re.sub(r"</(h[1-6]|tr|div|p)>", "\n", text)
    text = re.sub(r"</t[dh]>", "\t", text)

    # Remove all other HTML tags
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text)

    text = re.sub(r"[ \t]*\n\s*\n", "\n\n", text)
    return "\n".join(line.strip() for line in text.splitlines()).strip()
