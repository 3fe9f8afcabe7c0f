# storecms/api/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Header


def get_acting_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> Optional[str]:
    """
    Id of the admin user making the request, as forwarded by the auth layer
    in front of this service. Used only for revision attribution.
    """
    if x_user_id is None:
        return None
    x_user_id = x_user_id.strip()
    return x_user_id or None
