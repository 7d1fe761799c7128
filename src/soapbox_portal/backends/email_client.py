import logging
from typing import Dict, Optional

from mailgun.client import Client

logger = logging.getLogger(__name__)


class EmailClient:
    def __init__(self, config: dict):
        self.mailgun_api_key = config["mailgun_api_key"]
        self.domain = config["mailgun_domain"]
        self.sender_email = config["sender_email"]

        self.client = Client(auth=("api", self.mailgun_api_key))

    async def send_email(
        self,
        to: str,
        text: str,
        subject: str,
        reply_to: Optional[str] = None,
        tag: str = "team-registration",
    ) -> Dict:
        """
        Send a plain-text email through the Mailgun API

        Args:
            to: Recipient email address
            text: Email body text
            subject: Email subject
            reply_to: Optional Reply-To address
            tag: Mailgun tag used for delivery analytics

        Returns:
            Dict containing Mailgun API response

        Raises:
            RuntimeError: If email sending fails
        """
        data = {
            "from": self.sender_email,
            "to": to,
            "subject": subject,
            "text": text,
            "o:tag": tag,
        }
        if reply_to:
            data["h:Reply-To"] = reply_to

        try:
            req = self.client.messages.create(data=data, domain=self.domain)
            response = req.json()
        except Exception as e:
            logger.error(f"Failed to send email to {to}: {e}")
            raise RuntimeError(f"Email sending failed: {e}") from e

        if req.status_code != 200:
            logger.error(f"Mailgun API error: {req.status_code} - {response}")
            raise RuntimeError(f"Failed to send email: {response}")

        logger.info(f"Email sent to {to}: {response.get('id', 'unknown')}")
        return response
