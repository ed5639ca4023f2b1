from __future__ import annotations

from uuid import UUID

from fastapi import Header


def get_acting_user_id(
    x_user_id: UUID | None = Header(default=None, alias="X-User-Id"),
) -> UUID | None:
    """Identity established by the upstream authorization gate.

    Only used to stamp `published_by`; no permission checks happen here.
    """
    return x_user_id
