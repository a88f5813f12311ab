def book_json(b, borrow_count=None):
    data = {
        "id": b.id,
        "title": b.title,
        "description": b.description,
        "author_id": b.author_id,
        "author": b.author.name if b.author else None,
        "publisher_id": b.publisher_id,
        "publisher": b.publisher.name if b.publisher else None,
        "categories": [c.name for c in b.categories],
        "publication_year": b.publication_year,
        "total_quantity": b.total_quantity,
        "available_quantity": b.available_quantity,
        "borrow_count": b.borrow_count if borrow_count is None else borrow_count,
    }
    return data


def borrow_request_json(r):
    return {
        "id": r.id,
        "user_id": r.user_id,
        "request_date": r.request_date.isoformat() if r.request_date else None,
        "start_date": r.start_date.isoformat() if r.start_date else None,
        "end_date": r.end_date.isoformat() if r.end_date else None,
        "items": [
            {
                "book_id": item.book_id,
                "book_title": item.book.title if item.book else None,
                "quantity": item.quantity,
            }
            for item in r.items
        ],
    }
