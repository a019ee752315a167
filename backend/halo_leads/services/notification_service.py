"""
Notification service: hands outbound emails to the delivery webhook.
"""
import logging
from typing import Dict, Any, Optional
import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class NotificationService:
    """Service for sending notification emails through a webhook."""

    def __init__(self, webhook_url: Optional[str] = None):
        self.webhook_url = webhook_url if webhook_url is not None else settings.notification_webhook_url

    async def send_email(self, to: str, subject: str, text: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Deliver one email. Never raises; the result says whether it went out.
        """
        if not self.webhook_url:
            logger.warning("Notification webhook not configured, skipping email")
            return {"success": False, "error": "Webhook not configured"}

        payload = {
            "to": to,
            "subject": subject,
            "text": text,
            "context": context or {},
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    timeout=30.0
                )

                if response.status_code in (200, 201, 202):
                    logger.info(f"Notification sent to {to}")
                    return {"success": True, "status_code": response.status_code}

                logger.error(f"Notification webhook failed: {response.status_code} - {response.text}")
                return {
                    "success": False,
                    "status_code": response.status_code,
                    "error": response.text
                }

        except httpx.TimeoutException:
            logger.error("Notification webhook timeout")
            return {"success": False, "error": "Webhook timeout"}
        except Exception as e:
            logger.error(f"Notification webhook error: {e}")
            return {"success": False, "error": str(e)}

    async def send_lead_notification(
        self,
        contractor_email: str,
        contractor_name: str,
        lead_data: Dict[str, Any],
        campaign_name: str,
        landing_page_url: str,
    ) -> Dict[str, Any]:
        """Tell a contractor about a new homeowner lead."""
        text = "\n".join([
            f"Hi {contractor_name or 'there'},",
            "",
            f"You have a new lead from {campaign_name}.",
            "",
            f"Name: {lead_data.get('name')}",
            f"Email: {lead_data.get('email')}",
            f"Phone: {lead_data.get('phone')}",
            f"Address: {lead_data.get('address')}",
            f"Notes: {lead_data.get('notes') or 'None'}",
            "",
            f"Landing page: {landing_page_url}",
        ])
        return await self.send_email(
            contractor_email,
            f"New Lead from {campaign_name}",
            text,
            context={"lead": lead_data, "landingPageUrl": landing_page_url},
        )

    async def send_marketing_notification(self, lead_data: Dict[str, Any]) -> Dict[str, Any]:
        """Tell the sales inbox about an early access request."""
        text = "\n".join([
            "New early access request received!",
            "",
            f"Name: {lead_data.get('name')}",
            f"Email: {lead_data.get('email')}",
            f"Phone: {lead_data.get('phone') or 'Not provided'}",
            f"Source: {lead_data.get('source')}",
            "",
            f"Lead ID: {lead_data.get('id')}",
        ])
        return await self.send_email(
            settings.marketing_notification_email,
            f"New Early Access Request from {lead_data.get('name')}",
            text,
        )


def get_notification_service() -> NotificationService:
    return NotificationService()
