"""
Fragment storage for secret payloads.

A payload is stored as two contiguous chunks ordered by ``order_index``. The
split is a row layout detail only; it gives no confidentiality.
"""

import math

from sqlalchemy.orm import Session

from secretshare.models.fragment import SecretFragment


def split_payload(payload: str) -> list[str]:
    """Split into [first ceil(n/2) chars, rest]; an empty payload is one empty chunk."""
    if not payload:
        return [""]
    size = math.ceil(len(payload) / 2)
    return [payload[:size], payload[size:]]


def store_fragments(db: Session, secret_id: str, payload: str) -> int:
    """
    Add the payload's fragments to the session and return how many were added.

    Does not commit; the caller owns the transaction.
    """
    chunks = split_payload(payload)
    for index, chunk in enumerate(chunks):
        db.add(SecretFragment(secret_id=secret_id, order_index=index, content=chunk))
    return len(chunks)


def reassemble(db: Session, secret_id: str) -> str:
    """Concatenate a secret's fragments in order. Returns "" when none exist."""
    fragments = (
        db.query(SecretFragment.content)
        .filter(SecretFragment.secret_id == secret_id)
        .order_by(SecretFragment.order_index.asc())
        .all()
    )
    return "".join(content for (content,) in fragments)
