"""Capability lookup for subscription tiers."""

from typing import Dict, NamedTuple, Union

from speedtype.core.errors import InvalidInput
from speedtype.models.models import Subscription


class Capabilities(NamedTuple):
    extended_texts: bool


TIER_CAPABILITIES: Dict[Subscription, Capabilities] = {
    Subscription.FREE: Capabilities(extended_texts=False),
    Subscription.PRO: Capabilities(extended_texts=True),
    Subscription.TRAINER: Capabilities(extended_texts=True),
}


def parse_tier(value: Union[str, Subscription]) -> Subscription:
    """Converts a raw tier name into a Subscription.

    Raises:
        InvalidInput: If the value names no known tier.
    """
    try:
        return Subscription(value)
    except ValueError:
        raise InvalidInput("Invalid subscription type")


def capabilities_for(tier: Union[str, Subscription]) -> Capabilities:
    return TIER_CAPABILITIES[parse_tier(tier)]
