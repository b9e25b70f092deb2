"""Push service: encrypted web-push fan-out to stored subscriptions."""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from pywebpush import WebPushException, webpush

from api.models.article import Article
from api.models.subscription import PushSubscription
from database.repositories.subscription_repo import SubscriptionRepository
from shared.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

GONE_STATUSES = (404, 410)
ICON = "/icons/icon-192.png"
BADGE = "/icons/badge-72.png"


@dataclass
class PushResult:
    """Delivery counts for one fan-out."""
    sent: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)


def _status_of(error: WebPushException) -> Optional[int]:
    response = getattr(error, "response", None)
    return getattr(response, "status_code", None)


class PushService:
    """Stores subscriptions and delivers notifications to them."""

    def __init__(self, subscription_repo: SubscriptionRepository, settings: Optional[Settings] = None):
        self.subscription_repo = subscription_repo
        self.settings = settings or default_settings

    async def subscribe(self, subscription: PushSubscription) -> str:
        key = await self.subscription_repo.save(subscription)
        logger.info(f"Subscribed {key}")
        return key

    async def get_subscription_count(self) -> int:
        return await self.subscription_repo.count()

    def _vapid_claims(self) -> dict:
        subject = self.settings.vapid_subject or ""
        if not subject.startswith(("mailto:", "https://")):
            subject = f"mailto:{subject}"
        return {"sub": subject}

    async def send_notifications(self, articles: List[Article]) -> PushResult:
        """Tell every subscriber about a new batch, headlined by its first article."""
        if not articles:
            logger.info("No articles to notify about")
            return PushResult()

        top = articles[0]
        payload = {
            "title": "New Articles Available",
            "body": f"{len(articles)} new stories added. Top: {top.display_title}",
            "url": f"/?article={top.id}",
            "icon": ICON,
            "badge": BADGE,
        }
        logger.info(f"Sending notifications for {len(articles)} articles...")
        return await self._broadcast(payload)

    async def send_test_notification(self, title: str, message: str) -> PushResult:
        logger.info(f"Sending test push: {title}")
        return await self._broadcast({
            "title": title,
            "body": message,
            "url": "/?test=true",
            "icon": ICON,
            "badge": BADGE,
        })

    async def _broadcast(self, payload: dict) -> PushResult:
        result = PushResult()
        if not self.settings.has_feature("push"):
            logger.warning("VAPID keys not configured, push delivery disabled")
            return result

        subscriptions = await self.subscription_repo.find_all()
        logger.info(f"Found {len(subscriptions)} subscriptions")
        if not subscriptions:
            return result

        data = json.dumps(payload)
        outcomes = await asyncio.gather(
            *(self._send(key, subscription, data) for key, subscription in subscriptions),
            return_exceptions=True
        )
        for outcome in outcomes:
            if outcome is True:
                result.sent += 1
            else:
                result.failed += 1
                if isinstance(outcome, BaseException):
                    result.errors.append(str(outcome))
                elif isinstance(outcome, str):
                    result.errors.append(outcome)

        logger.info(f"Notifications sent: {result.sent} delivered, {result.failed} failed")
        return result

    async def _send(self, key: str, subscription: PushSubscription, data: str):
        """Deliver one push. Returns True, or an error description on failure."""
        try:
            await asyncio.to_thread(
                webpush,
                subscription_info=subscription.to_subscription_info(),
                data=data,
                vapid_private_key=self.settings.vapid_private_key,
                vapid_claims=self._vapid_claims(),
                ttl=self.settings.push_ttl,
            )
            return True
        except WebPushException as e:
            status = _status_of(e)
            if status in GONE_STATUSES:
                await self.subscription_repo.delete(key)
                logger.info(f"Deleted expired subscription: {key}")
                return f"{key}: subscription gone ({status})"
            logger.error(f"Error sending push to {key}: {e}")
            return f"{key}: {e}"
