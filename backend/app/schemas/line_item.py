"""Invoice line item schemas."""

from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel, ConfigDict, field_validator


class LineItemBase(BaseModel):
    description: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal
    use_quantity: bool = True

    # Stored with two places; line totals are computed from the stored values.
    @field_validator("quantity", "unit_price")
    @classmethod
    def round_to_cents(cls, value: Decimal) -> Decimal:
        return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class LineItemCreate(LineItemBase):
    pass


class LineItemRead(LineItemBase):
    id: int
    position: int
    line_total: Decimal

    model_config = ConfigDict(from_attributes=True)
