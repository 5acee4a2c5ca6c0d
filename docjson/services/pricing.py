"""Model pricing and cost estimation.

The pricing table is built once at startup from settings and never mutated
afterwards; it is shared by all concurrent requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from docjson.core.config import ModelRateConfig

_PER_MILLION = Decimal(1_000_000)
_COST_QUANTUM = Decimal("0.00001")


@dataclass(frozen=True)
class PricingRate:
    """USD rates per million tokens for one model."""

    model: str
    input_per_million: Decimal
    output_per_million: Optional[Decimal] = None
    cached_input_per_million: Optional[Decimal] = None


def _to_decimal(value: float | None) -> Decimal | None:
    # str() first so 0.4 prices as 0.4, not its binary approximation
    return None if value is None else Decimal(str(value))


class PricingTable:
    """Immutable model -> rate map with alias resolution (case-insensitive)."""

    def __init__(self, rates: Iterable[PricingRate] = (), aliases: Mapping[str, str] | None = None):
        self._rates = MappingProxyType({rate.model.lower(): rate for rate in rates})
        self._aliases = MappingProxyType(
            {alias.lower(): target for alias, target in (aliases or {}).items()}
        )

    @classmethod
    def from_config(
        cls, models: Iterable[ModelRateConfig], aliases: Mapping[str, str] | None = None
    ) -> "PricingTable":
        rates = [
            PricingRate(
                model=m.model,
                input_per_million=_to_decimal(m.input_per_million),
                output_per_million=_to_decimal(m.output_per_million),
                cached_input_per_million=_to_decimal(m.cached_input_per_million),
            )
            for m in models
        ]
        return cls(rates, aliases)

    def __len__(self) -> int:
        return len(self._rates)

    def resolve(self, model: str) -> str:
        """Direct match, else alias target, else the literal id."""
        if model.lower() in self._rates:
            return model
        return self._aliases.get(model.lower(), model)

    def get_rate(self, model: str) -> PricingRate:
        """Rate for ``model``; unpriced models get zero rates."""
        rate = self._rates.get(self.resolve(model).lower())
        if rate is None:
            return PricingRate(model=model, input_per_million=Decimal(0), output_per_million=Decimal(0))
        return rate

    def estimate_usd(
        self,
        model: str,
        input_tokens: int,
        output_tokens: int,
        cached_input_tokens: int = 0,
    ) -> Decimal:
        """Estimated cost in USD, rounded half away from zero to 5 places."""
        rate = self.get_rate(model)
        cached = max(0, cached_input_tokens)
        fresh_input = max(0, input_tokens - cached)

        cost = Decimal(fresh_input) / _PER_MILLION * rate.input_per_million
        if rate.output_per_million is not None:
            cost += Decimal(max(0, output_tokens)) / _PER_MILLION * rate.output_per_million
        if rate.cached_input_per_million is not None and cached > 0:
            cost += Decimal(cached) / _PER_MILLION * rate.cached_input_per_million

        return max(Decimal(0), cost).quantize(_COST_QUANTUM, rounding=ROUND_HALF_UP)


__all__ = ["PricingRate", "PricingTable"]
