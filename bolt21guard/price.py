# Sanity checks for the BTC/USD price fetched from a public API
from typing import Optional

from loguru import logger

SATS_PER_BTC = 100_000_000
MIN_PRICE_USD = 1_000
MAX_PRICE_USD = 10_000_000
# largest relative move accepted between two updates
MAX_CHANGE = 0.5


class PriceGuard:
    def __init__(self, price_usd: Optional[float] = None):
        self.price_usd = price_usd

    def accept(self, new_price: float) -> bool:
        """
        Keep `new_price` if it looks real. A rejected update leaves the
        previous price in place.
        """
        if isinstance(new_price, bool) or not isinstance(new_price, (int, float)):
            logger.warning("price: not a number")
            return False
        # also rejects nan
        if not MIN_PRICE_USD <= new_price <= MAX_PRICE_USD:
            logger.warning(f"price: ${new_price} out of realistic range")
            return False
        if self.price_usd is not None:
            change = abs(new_price - self.price_usd) / self.price_usd
            if change > MAX_CHANGE:
                logger.warning(
                    f"price: change too large ({change * 100:.1f}%), possible manipulation"
                )
                return False
        self.price_usd = float(new_price)
        logger.info(f"price: updated to ${self.price_usd}")
        return True

    def sats_to_usd(self, sats: int) -> Optional[float]:
        if self.price_usd is None:
            return None
        return (sats / SATS_PER_BTC) * self.price_usd

    def usd_to_sats(self, usd: float) -> Optional[int]:
        if self.price_usd is None:
            return None
        return round((usd / self.price_usd) * SATS_PER_BTC)
