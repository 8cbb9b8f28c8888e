from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DeliveryTarget:
    site_name: str
    site_url: str
    recipient_email: Optional[str]
    recipient_name: str


def resolve_delivery_target(reminder) -> DeliveryTarget:
    """
    Resolve a reminder's site and owner into what a sender needs.
    Read-only; relies on ``site``/``owner`` already being joined.
    """
    site = reminder.site
    owner = reminder.owner

    display_name = getattr(owner, "display_name", "") or owner.get_username()

    return DeliveryTarget(
        site_name=site.name,
        site_url=site.url,
        recipient_email=(owner.email or None),
        recipient_name=display_name,
    )
