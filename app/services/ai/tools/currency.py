"""Currency conversion tool — lets the model normalise fares to one currency."""

from typing import Any

from app.data.currency import convert, format_price
from app.services.ai.tools.base import Tool


class CurrencyConversionTool(Tool):
    name = "convert_currency"
    description = (
        "Convert a fare amount from one currency to another using reference "
        "exchange rates. Use it to compare fares quoted in different currencies "
        "against the traveler's budget."
    )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "amount": {"type": "number", "description": "Amount to convert"},
                "from_currency": {"type": "string", "description": "ISO 4217 code of the amount, e.g. EUR"},
                "to_currency": {"type": "string", "description": "ISO 4217 target code, e.g. USD"},
            },
            "required": ["amount", "from_currency", "to_currency"],
        }

    async def execute(self, params: dict[str, Any]) -> Any:
        try:
            amount = float(params["amount"])
            from_currency = str(params["from_currency"])
            to_currency = str(params["to_currency"])
        except KeyError as e:
            raise ValueError(f"missing parameter {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid amount: {params.get('amount')!r}") from e

        converted = convert(amount, from_currency, to_currency)
        return {
            "amount": converted,
            "currency": to_currency.upper(),
            "formatted": format_price(converted, to_currency.upper()),
        }
