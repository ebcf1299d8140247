import pytest


@pytest.fixture(autouse=True)
def _ctx(identity_bed, ordering_bed):
    """Back-office analytics read users from Identity, so both domains are reset per test."""
    with identity_bed.domain_context():
        with ordering_bed.domain_context():
            yield
