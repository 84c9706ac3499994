"""KeyUsage entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyUsage:
    """Spend and limits of the generation API key (USD).

    Attributes:
        usage: Amount spent.
        limit: Spending limit (0 when unlimited).
        credits: Remaining credits.
    """

    usage: float
    limit: float
    credits: float

    @property
    def usage_ratio(self) -> float | None:
        """Fraction of the limit spent, or None without a limit."""
        if self.limit <= 0:
            return None
        return self.usage / self.limit
