"""Review submission — command, handler and listing."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.review.review import Review
from shared.queries import fetch_all


@catalogue.command(part_of="Review")
class SubmitReview:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    user_name: String(max_length=254)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)


@catalogue.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        # Reviews are only accepted for listed products
        current_domain.repository_for(Product).get(command.product_id)

        review = Review.submit(
            product_id=command.product_id,
            user_id=command.user_id,
            user_name=command.user_name,
            rating=command.rating,
            comment=command.comment,
        )
        current_domain.repository_for(Review).add(review)
        return str(review.id)


def reviews_for(product_id):
    """Reviews of a product, newest first."""
    reviews = fetch_all(current_domain.repository_for(Review)._dao.query.filter(product_id=str(product_id)))
    return sorted(reviews, key=lambda r: r.created_at, reverse=True)
