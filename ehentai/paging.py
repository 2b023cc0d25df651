"""
Page arithmetic shared by search results and gallery sub-pages.
"""

# Fixed by the site layout
ARTICLES_PER_PAGE = 25
IMAGES_PER_PAGE = 40


def pages_needed(count: int, per_page: int) -> int:
    """Return how many listing pages hold *count* items.

    ``count == 0`` yields zero pages; the ``count - 1`` step is never taken
    on an empty listing.
    """
    if count <= 0:
        return 0
    return 1 + (count - 1) // per_page
