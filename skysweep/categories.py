"""Map the category selection flags to the categories a run sweeps."""

from typing import List

from .models import Category

DEFAULT_CATEGORIES = (Category.POST, Category.REPOST)


def select_categories(
    only_posts: bool = False,
    only_reposts: bool = False,
    only_likes: bool = False,
    include_likes: bool = False,
) -> List[Category]:
    """Return the categories to sweep, in processing order.

    The flags are not validated against each other. When several are set the
    first match wins: only_posts, then only_reposts, then only_likes, then
    include_likes.
    """
    if only_posts:
        return [Category.POST]
    if only_reposts:
        return [Category.REPOST]
    if only_likes:
        return [Category.LIKE]
    if include_likes:
        return [*DEFAULT_CATEGORIES, Category.LIKE]
    return list(DEFAULT_CATEGORIES)
