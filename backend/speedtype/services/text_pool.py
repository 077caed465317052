"""Reference texts for typing sessions, gated by subscription tier."""

import random
from typing import List, Optional, Union

from speedtype.models.models import Subscription
from speedtype.services.tiers import capabilities_for

BASE_TEXTS = [
    "Technology is changing the world faster than ever before, helping people connect, learn, and solve hard problems. Digital tools have become part of daily life, making tasks easier and communication more effective.",
    "Artificial intelligence lets computers learn from data and make decisions. It improves writing assistants, voice recognition, and even games by adapting to the way people behave.",
    "Cloud computing lets everyone store, share, and open files from anywhere at any time. It keeps projects safe and available, making teamwork faster and more efficient.",
    "Cybersecurity protects personal data and keeps systems safe from attackers. Strong passwords and encryption help secure everything we do online.",
    "Coding teaches logical thinking and creativity, letting people build apps, automate chores, and design solutions that shape the digital world.",
]

EXTENDED_TEXTS = [
    "Python is a general purpose programming language that emphasizes readable code. Its standard library covers networking, text processing, and data formats, and a large ecosystem of packages extends it to science, web services, and automation.",
    "A relational database stores data in tables of rows and columns and answers questions written in SQL. Transactions group several changes so that either all of them are applied or none of them are, even when many clients write at once.",
    "HTTP is the request and response protocol behind the web. A client sends a method, a path, headers, and an optional body; the server replies with a status code, headers, and a body that is often a JSON document.",
]


def texts_for(tier: Union[str, Subscription]) -> List[str]:
    """Returns the pool of texts a tier may be given."""
    texts = list(BASE_TEXTS)
    if capabilities_for(tier).extended_texts:
        texts.extend(EXTENDED_TEXTS)
    return texts


def pick_text(
    tier: Union[str, Subscription] = Subscription.FREE,
    rng: Optional[random.Random] = None,
) -> str:
    """Samples one reference text uniformly from the tier's pool.

    Args:
        tier: The account's subscription tier. Anonymous players use ``free``.
        rng: Random source, injectable for deterministic tests.

    Returns:
        str: The chosen reference text.
    """
    rng = rng or random
    return rng.choice(texts_for(tier))
