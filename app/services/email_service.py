import logging

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig
from config import EMAIL_FROM, EMAIL_FROM_NAME, EMAIL_PORT, EMAIL_SERVER

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        self.config = ConnectionConfig(
            MAIL_USERNAME="",
            MAIL_PASSWORD="",
            MAIL_FROM=EMAIL_FROM,
            MAIL_PORT=EMAIL_PORT,
            MAIL_SERVER=EMAIL_SERVER,
            MAIL_FROM_NAME=EMAIL_FROM_NAME,
            MAIL_STARTTLS=False,
            MAIL_SSL_TLS=False,
            USE_CREDENTIALS=False,
            VALIDATE_CERTS=False,
        )
        self.mailer = FastMail(self.config)

    async def send_email(self, to_email: str, subject: str, body: str):
        """Send a plain-text email"""
        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=body,
            subtype="plain",
        )
        await self.mailer.send_message(message)
        logger.info("Sent '%s' email to %s", subject, to_email)

    async def send_password_reset_email(self, email: str, reset_url: str):
        await self.send_email(
            email,
            "Cliente.io - Password Reset Request",
            f"""We have received your request to reset your password. Please use the following link:

{reset_url}

If you didn't make the request, just ignore this email. Your password won't change until you create a new password.""",
        )

    async def send_registration_email(self, email: str, first_name: str, registration_url: str):
        await self.send_email(
            email,
            "Cliente.io - Complete your registration",
            f"""Hello {first_name or ''},

An account has been created for you. Please use the following link to set your password and finish your registration:

{registration_url}

The link expires soon; ask your administrator for a new invitation if it stops working.""",
        )
