"""ZeptoMail implementation of EmailProvider.

Delivers the double-check code through ZeptoMail's transactional email API
over the shared async HttpClient. The HTML body is rendered from
templates/emails/verification.html; a plain-text body is always attached.
"""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from shared.datetime_utils import format_duration
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.in/v1.1/email"
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)


class ZeptoMailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        code_ttl_seconds: int = 600,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._expires_in = format_duration(code_ttl_seconds)
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    async def _send(
        self,
        to_email: str,
        to_name: Optional[str],
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        if not self._settings.zepto_api_token:
            log.error("email_send_failed", reason="token_not_configured")
            return False

        payload: dict = {
            "from": {
                "address": self._settings.zepto_from_email,
                "name": self._settings.zepto_from_name,
            },
            "to": [
                {
                    "email_address": {
                        "address": to_email,
                        "name": to_name or to_email,
                    }
                }
            ],
            "subject": subject,
            "htmlbody": html_body,
            "textbody": text_body,
        }

        token = self._settings.zepto_api_token
        if not token.startswith("Zoho-enczapikey "):
            token = f"Zoho-enczapikey {token}"

        headers = {"Authorization": token, "Content-Type": "application/json"}

        try:
            response = await self._http.post(
                _ZEPTO_API_URL, json=payload, headers=headers
            )
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code in (200, 201, 202):
            log.info("email_sent_success", to_email=to_email, subject=subject)
            return True
        log.error(
            "email_send_failed",
            to_email=to_email,
            status_code=response.status_code,
            response=response.text[:200],
        )
        return False

    async def send_verification_email(
        self, email: str, user_name: Optional[str], code: str
    ) -> bool:
        sender = self._settings.zepto_from_name
        subject = "Secure Login Verification Code"
        template = self._jinja.get_template("verification.html")
        html_body = template.render(
            code=code,
            user_name=user_name,
            sender_name=sender,
            expires_in=self._expires_in,
        )
        text_body = (
            f"Hello{f' {user_name}' if user_name else ''},\n\n"
            f"Your verification code for secure login is: {code}\n\n"
            f"This code will expire in {self._expires_in}.\n"
            f"If you didn't request this code, please ignore this email.\n\n"
            f"Best regards,\n{sender}"
        )
        return await self._send(email, user_name, subject, html_body, text_body)
