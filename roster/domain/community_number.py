import logging
import random
from collections.abc import Collection

from ..errors import CommunityNumberExhaustedError

logger = logging.getLogger(__name__)

COMMUNITY_NUMBER_MIN = 1000
COMMUNITY_NUMBER_MAX = 9999
COMMUNITY_NUMBER_SPACE = COMMUNITY_NUMBER_MAX - COMMUNITY_NUMBER_MIN + 1


def format_community_id(prefix: str, community_number: str) -> str:
    return f"{prefix}-{community_number}"


def generate_community_number(
    taken: Collection[str],
    *,
    max_attempts: int,
    rng: random.Random | None = None,
) -> str:
    """
    Draw an unused 4-digit community number.

    Rejection sampling runs for at most ``max_attempts`` draws. Past that cap
    the number is drawn uniformly from whatever is still free, so the result
    is unique whenever any number is left.

    Args:
        taken: Numbers already issued (active and archived)
        max_attempts: Sampling budget before falling back to the free list
        rng: Random source, for deterministic tests

    Raises:
        CommunityNumberExhaustedError: If all 9000 numbers are issued
    """
    source = rng or random.SystemRandom()
    taken_set = set(taken)

    for _ in range(max_attempts):
        candidate = str(source.randint(COMMUNITY_NUMBER_MIN, COMMUNITY_NUMBER_MAX))
        if candidate not in taken_set:
            return candidate

    free = [
        str(number)
        for number in range(COMMUNITY_NUMBER_MIN, COMMUNITY_NUMBER_MAX + 1)
        if str(number) not in taken_set
    ]
    if not free:
        raise CommunityNumberExhaustedError(details={"issued": len(taken_set)})

    logger.warning(
        "community_number_sampling_exhausted attempts=%s issued=%s free=%s",
        max_attempts,
        len(taken_set),
        len(free),
    )
    return source.choice(free)
