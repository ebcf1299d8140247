"""Repository read helpers shared by the WicketStore domains."""

BATCH_SIZE = 100


def fetch_all(query, order_by="id", batch_size=BATCH_SIZE):
    """Read every record matching ``query``, one page at a time.

    A bare ``query.all()`` stops at the entity's default limit. Pages are
    ordered by ``order_by`` so offsets stay stable on SQL providers.
    """
    query = query.order_by(order_by).limit(batch_size)
    records = []
    offset = 0
    while True:
        result = query.offset(offset).all()
        records.extend(result.items)
        offset += batch_size
        if not result.items or offset >= result.total:
            return records
