import logging
import random
from typing import List, Optional, Sequence, Union

from .exceptions import InvalidConfiguration
from .models import CategoryFilter, Word

logger = logging.getLogger(__name__)


def filter_by_category(
    pool: Sequence[Word], category: Union[CategoryFilter, str]
) -> List[Word]:
    """Returns the words of ``pool`` in ``category``; ``all`` keeps everything."""
    category = CategoryFilter(category)
    if category == CategoryFilter.ALL:
        return list(pool)
    return [w for w in pool if w.category.value == category.value]


def sample(
    pool: Sequence[Word],
    category: Union[CategoryFilter, str],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[Word]:
    """Randomly selects up to ``count`` words of a category.

    The filtered pool is shuffled and truncated; it is never padded, so a
    small pool simply yields a shorter session.
    """
    if count < 0:
        raise InvalidConfiguration("count", count)

    rng = rng or random
    filtered = filter_by_category(pool, category)
    rng.shuffle(filtered)
    selected = filtered[: min(count, len(filtered))]

    if len(selected) < count:
        logger.info(
            f"Requested {count} words from {CategoryFilter(category).value}, "
            f"only {len(selected)} available"
        )
    return selected
