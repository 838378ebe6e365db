# backend/expiry_notifier/services/message_composer.py
"""Turn a user's accumulated expiring items into one push message"""

from expiry_notifier.models.records import ExpiryMessage, NotificationTarget

EXPIRY_TITLE = "Cảnh báo hết hạn! ⏳"
ACTION_FIND_RECIPE = "FIND_RECIPE"


def compose_body(items) -> str:
    first_item = items[0]
    if len(items) == 1:
        return f'"{first_item}" sẽ hết hạn vào ngày mai. Dùng ngay nhé!'
    return f'"{first_item}" và {len(items) - 1} món khác sẽ hết hạn vào ngày mai.'


def compose_message(target: NotificationTarget) -> ExpiryMessage:
    """
    Build the expiry warning for one user.

    The first item in scan order is named in the body and suggested as the
    recipe ingredient. Targets always hold at least one item.
    """
    if not target.items:
        raise ValueError(f"Notification target {target.user_id} has no items")

    return ExpiryMessage(
        user_id=target.user_id,
        token=target.token,
        title=EXPIRY_TITLE,
        body=compose_body(target.items),
        data={
            "action_id": ACTION_FIND_RECIPE,
            "ingredient": target.items[0]
        }
    )
