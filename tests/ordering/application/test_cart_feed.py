"""Application tests for the live cart feed."""

from ordering.cart.feed import CartFeed, cart_feed
from ordering.cart.items import AddToCart, ClearCart
from protean import current_domain


class TestCartFeed:
    def test_publish_reaches_only_that_users_subscribers(self):
        feed = CartFeed()
        seen = []
        feed.subscribe("uid-001", seen.append)
        feed.subscribe("uid-002", lambda user_id: seen.append(f"other:{user_id}"))

        feed.publish("uid-001")

        assert seen == ["uid-001"]

    def test_unsubscribe(self):
        feed = CartFeed()
        seen = []
        unsubscribe = feed.subscribe("uid-001", seen.append)
        unsubscribe()
        unsubscribe()

        feed.publish("uid-001")

        assert seen == []
        assert feed.subscriber_count("uid-001") == 0

    def test_failing_subscriber_does_not_block_others(self):
        feed = CartFeed()
        seen = []

        def broken(user_id):
            raise RuntimeError("listener crashed")

        feed.subscribe("uid-001", broken)
        feed.subscribe("uid-001", seen.append)

        feed.publish("uid-001")

        assert seen == ["uid-001"]


class TestCartEventsReachTheFeed:
    def test_committed_cart_changes_are_published(self):
        seen = []
        unsubscribe = cart_feed.subscribe("uid-001", seen.append)
        try:
            current_domain.process(
                AddToCart(user_id="uid-001", product_id="ball-001", price=1800, quantity=1),
                asynchronous=False,
            )
            current_domain.process(ClearCart(user_id="uid-001"), asynchronous=False)
        finally:
            unsubscribe()

        assert seen == ["uid-001", "uid-001"]
