"""In-app notifications."""

from typing import Optional

from src.models.notification import Notification, NotificationType
from src.services.supabase_client import SessionProvider, insert_notification
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def create_notification(notification: Notification, session: Optional[SessionProvider] = None) -> bool:
    """Insert an in-app notification. Returns False (and logs) on failure."""
    try:
        await insert_notification(notification.model_dump(mode="json"), session)
    except Exception as e:
        logger.error(
            "Failed to create notification",
            notification_type=notification.type.value,
            recipient_id=mask_user_id(notification.user_id),
            error=str(e)
        )
        return False

    logger.info(
        "Notification created",
        notification_type=notification.type.value,
        recipient_id=mask_user_id(notification.user_id)
    )
    return True


async def notify_report_submitted(
    job_creator_id: str,
    property_address: str,
    job_id: str,
    inspector_id: str,
    session: Optional[SessionProvider] = None,
) -> bool:
    """Tell the job's requester that the inspection report is ready."""
    return await create_notification(
        Notification(
            user_id=job_creator_id,
            type=NotificationType.REPORT_SUBMITTED,
            title="Report Ready!",
            message=(
                f"Your inspector has submitted findings for {property_address}. "
                "Approve to release escrow payment."
            ),
            job_id=job_id,
            from_user_id=inspector_id,
        ),
        session,
    )
