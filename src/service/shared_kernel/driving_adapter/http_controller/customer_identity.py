from typing import Annotated

from fastapi import Header

from src.platform.exception.exceptions import ForbiddenError


async def get_current_customer_id(
    x_customer_id: Annotated[int, Header(gt=0, description='Customer id set by the gateway')],
) -> int:
    """Customer identity is authenticated upstream and forwarded as a trusted header."""
    return x_customer_id


def ensure_owner(*, owner_id: int, customer_id: int) -> None:
    if owner_id != customer_id:
        raise ForbiddenError('Only the customer who made the booking can access it')
