"""
Reusable field types shared by the entity schemas
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, List
import re

from pydantic import AfterValidator, BeforeValidator, EmailStr, Field, StringConstraints

PHONE_PATTERN = r"^[\+]?[0-9\(\)\-\s]+$"
NAME_PATTERN = r"^[a-zA-ZÀ-ÿ\s]+$"
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def _check_password(value: str) -> str:
    if not (re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)):
        raise ValueError("Senha deve conter ao menos uma letra minúscula, maiúscula e um número")
    return value


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _require_iso(value):
    # Only ISO-8601 strings or datetime objects; no epoch numbers
    if isinstance(value, (int, float)):
        raise ValueError("Data deve estar em formato ISO válido")
    return value


def _check_money(value: Decimal) -> Decimal:
    if value.as_tuple().exponent < -2 and value != value.quantize(Decimal("0.01")):
        raise ValueError("Valor deve ter no máximo 2 casas decimais")
    return value


def _check_items(values: List[str]) -> List[str]:
    if any(not item.strip() for item in values):
        raise ValueError("Itens não podem estar vazios")
    return values


Phone = Annotated[str, StringConstraints(min_length=10, max_length=15, pattern=PHONE_PATTERN)]

Email = EmailStr

Name = Annotated[str, StringConstraints(min_length=2, max_length=100, pattern=NAME_PATTERN)]

Password = Annotated[str, StringConstraints(min_length=8), AfterValidator(_check_password)]

IsoDateTime = Annotated[datetime, BeforeValidator(_require_iso), AfterValidator(_to_naive_utc)]

Slug = Annotated[str, StringConstraints(min_length=3, max_length=50, pattern=SLUG_PATTERN)]

Money = Annotated[Decimal, Field(ge=0, le=Decimal("999999.99")), AfterValidator(_check_money)]

Duration = Annotated[int, Field(ge=15, le=480)]

StringList = Annotated[List[str], AfterValidator(_check_items)]
