"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer

from catalogue.domain import catalogue


@catalogue.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id: Identifier(required=True)
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    submitted_at: DateTime(required=True)
