"""
Shared money type for response schemas.

Amounts are Decimal inside the service; on the wire they are plain JSON
numbers (Pydantic would otherwise serialize Decimal as a string).
"""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
