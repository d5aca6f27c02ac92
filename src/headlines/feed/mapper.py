"""Convert provider responses into display records."""

from headlines.feed.models import DisplayRecord, FeedResponse

DEFAULT_PLACEHOLDER = "..."


def to_display_records(
    response: FeedResponse,
    *,
    placeholder: str = DEFAULT_PLACEHOLDER,
    generation: int = 0,
) -> list[DisplayRecord]:
    """Map every article of a successful response to a record, preserving order.

    The placeholder replaces the description only when it is absent.
    """
    return [
        DisplayRecord(
            title=article.title,
            description=article.description if article.description is not None else placeholder,
            link=article.link,
            generation=generation,
        )
        for article in response.results
    ]
