"""Review aggregate — a signed-in shopper's rating and comment on a product."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from catalogue.domain import catalogue


@catalogue.aggregate
class Review:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    user_name: String(max_length=254)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)
    created_at: DateTime()

    @invariant.post
    def comment_must_not_be_blank(self):
        if not self.comment or not self.comment.strip():
            raise ValidationError({"comment": ["Comment cannot be blank"]})

    @classmethod
    def submit(cls, product_id, user_id, rating, comment, user_name=None):
        from catalogue.review.events import ReviewSubmitted

        now = datetime.now(UTC)
        review = cls(
            product_id=product_id,
            user_id=user_id,
            user_name=user_name,
            rating=rating,
            comment=comment,
            created_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                user_id=str(user_id),
                rating=rating,
                submitted_at=now,
            )
        )
        return review
