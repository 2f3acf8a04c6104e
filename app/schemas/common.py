# app/schemas/common.py
from decimal import Decimal
from typing import Annotated
from pydantic import PlainSerializer

# Amounts stay Decimal in Python and go out as plain JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
