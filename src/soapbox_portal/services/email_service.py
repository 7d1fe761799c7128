"""Email service: registration notifications for organisers and teams"""

import logging
from typing import Dict, List, Optional

from soapbox_portal.backends.email_client import EmailClient
from soapbox_portal.models.registration import TeamMember, TeamRegistration

logger = logging.getLogger(__name__)


class EmailService:
    """Notifier that emails the organisers and confirms to the team contact"""

    def __init__(self, email_config: dict, email_client: Optional[EmailClient] = None):
        self.email_client = email_client or EmailClient(email_config)
        self.organizer_email = email_config.get("organizer_email")
        self.event_name = email_config.get("event_name") or "Soapbox Derby"

    async def send(
        self, registration: TeamRegistration, members: List[TeamMember]
    ) -> bool:
        """
        Send the organiser notification and the team confirmation.

        Returns:
            bool: True only if every email was delivered to Mailgun
        """
        results = []

        if self.organizer_email:
            results.append(
                await self._send_email(
                    self.organizer_email,
                    self._organizer_email(registration, members),
                    reply_to=registration.email,
                    tag="registration-organizer",
                )
            )
        else:
            logger.warning("ORGANIZER_EMAIL not configured, skipping organiser notification")

        if registration.email:
            results.append(
                await self._send_email(
                    registration.email,
                    self._confirmation_email(registration, members),
                    tag="registration-confirmation",
                )
            )
        else:
            logger.info("No team email provided, skipping confirmation")

        return bool(results) and all(results)

    def _format_team_details(
        self, registration: TeamRegistration, members: List[TeamMember]
    ) -> str:
        """Plain-text summary shared by both emails"""
        lines = [
            f"Team Name: {registration.team_name}",
            f"Captain Name: {registration.captain_name}",
            f"Email: {registration.email}",
            f"Phone: {registration.phone_number}",
            f"Age Range: {registration.age_range or 'Not specified'}",
            f"Participants: {registration.participants_count}",
            "",
            f"Soapbox Name: {registration.soapbox_name}",
            f"Dimensions: {registration.dimensions}",
            f"Design Description: {registration.design_description}",
            f"Brakes & Steering: {registration.brakes_steering}",
        ]
        if registration.file_ref:
            lines.append("Design file: uploaded")

        lines.append("")
        lines.append("Team Members:")
        for index, member in enumerate(members, start=1):
            lines.append(f"  {index}. {member.name} (age {member.age})")

        return "\n".join(lines)

    def _organizer_email(
        self, registration: TeamRegistration, members: List[TeamMember]
    ) -> Dict[str, str]:
        subject = f"New Team Registration: {registration.team_name}"
        body = f"""A team registration was submitted for {self.event_name}.

{self._format_team_details(registration, members)}

Status: {registration.status.value}
Submitted at {registration.updated_at.strftime('%B %d, %Y at %I:%M %p UTC')}."""
        return {"subject": subject, "body": body}

    def _confirmation_email(
        self, registration: TeamRegistration, members: List[TeamMember]
    ) -> Dict[str, str]:
        subject = f"Your team is registered for {self.event_name}"
        body = f"""Hi {registration.captain_name},

Thanks for registering {registration.team_name} for {self.event_name}!

{self._format_team_details(registration, members)}

You can update your registration at any time by submitting the form again.
We will let you know once the organisers have reviewed your entry.

Best regards,
The {self.event_name} team"""
        return {"subject": subject, "body": body}

    async def _send_email(
        self,
        to_email: str,
        email_content: Dict[str, str],
        reply_to: Optional[str] = None,
        tag: str = "team-registration",
    ) -> bool:
        """Send email using the email client"""
        try:
            await self.email_client.send_email(
                to=to_email,
                text=email_content["body"],
                subject=email_content["subject"],
                reply_to=reply_to,
                tag=tag,
            )
            return True
        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False
