"""Price Oracle Adapter — нормализованная котировка нативной валюты.

Читает внешний PriceFeed и возвращает PriceQuote (price, decimals, updated_at).
Операция только читает: побочных эффектов нет.

Порядок проверок:
1. Вызов feed → OracleUnavailable при любой ошибке
2. answer <= 0 → OracleUnavailable
3. updated_at == 0 или answered_in_round < round_id → StalePrice
4. updated_at в будущем → StalePrice
5. now - updated_at > max_price_age_sec → StalePrice
6. Нормализованная котировка не проходит контракт price_quote → OracleUnavailable
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import jsonschema
from pydantic import ValidationError

from src.core.contracts.validators import PriceQuoteValidator
from src.core.domain.errors import ExchangeError, OracleUnavailable, StalePrice
from src.core.domain.quote import PriceQuote, RoundData
from src.core.math.conversions import native_to_tokens, tokens_to_native
from src.oracle.price_feed import PriceFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OracleConfig:
    """Конфигурация адаптера оракула.

    max_price_age_sec=None отключает проверку возраста котировки,
    остальные проверки при этом сохраняются.
    """

    max_price_age_sec: Optional[int] = 3600
    require_complete_round: bool = True

    def __post_init__(self):
        if self.max_price_age_sec is not None and self.max_price_age_sec <= 0:
            raise ValueError(
                f"max_price_age_sec must be positive or None, got {self.max_price_age_sec}"
            )


class PriceOracleAdapter:
    """Адаптер внешнего price feed для нативной валюты."""

    def __init__(
        self,
        feed: PriceFeed,
        config: Optional[OracleConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            feed: внешний price feed
            config: конфигурация (default OracleConfig())
            clock: источник текущего времени (unix sec)
        """
        self._feed = feed
        self.config = config or OracleConfig()
        self._clock = clock
        self._quote_contract = PriceQuoteValidator()

    @property
    def feed(self) -> PriceFeed:
        return self._feed

    def set_feed(self, feed: PriceFeed) -> PriceFeed:
        """Замена feed. Права проверяет вызывающая сторона.

        Returns:
            Предыдущий feed
        """
        previous = self._feed
        self._feed = feed
        return previous

    def get_native_price(self) -> PriceQuote:
        """Текущая котировка нативной валюты.

        Returns:
            PriceQuote с price > 0

        Raises:
            OracleUnavailable: feed упал или вернул невалидные данные
            StalePrice: раунд не завершён или котировка старше max age
        """
        try:
            raw = self._feed.latest_round_data()
            decimals = self._feed.decimals()
            round_data = RoundData.from_tuple(raw)
        except ExchangeError:
            raise
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning("Price feed returned malformed round data: %s", e)
            raise OracleUnavailable(f"Malformed round data: {e}") from e
        except Exception as e:
            logger.warning("Price feed call failed: %s", e)
            raise OracleUnavailable(f"Price feed call failed: {e}") from e

        if round_data.answer <= 0:
            logger.warning("Price feed returned non-positive answer %d", round_data.answer)
            raise OracleUnavailable(f"Invalid price from feed: {round_data.answer}")

        if round_data.updated_at == 0:
            raise StalePrice("Round not complete")

        if (
            self.config.require_complete_round
            and round_data.answered_in_round < round_data.round_id
        ):
            raise StalePrice(
                f"Stale round: answered_in_round {round_data.answered_in_round} "
                f"< round_id {round_data.round_id}"
            )

        now = int(self._clock())
        if round_data.updated_at > now:
            raise StalePrice(
                f"Quote timestamp {round_data.updated_at} is in the future (now={now})"
            )

        age = now - round_data.updated_at
        max_age = self.config.max_price_age_sec
        if max_age is not None and age > max_age:
            logger.warning("Stale price: age %ds > max %ds", age, max_age)
            raise StalePrice(f"Price is stale: age {age}s > max {max_age}s")

        normalized = {
            "price": round_data.answer,
            "decimals": decimals,
            "updated_at": round_data.updated_at,
            "round_id": round_data.round_id,
        }
        try:
            self._quote_contract.validate(normalized)
        except jsonschema.ValidationError as e:
            logger.warning("Price feed quote violates price_quote contract: %s", e.message)
            raise OracleUnavailable(f"Malformed quote: {e.message}") from e

        quote = PriceQuote(**normalized)
        logger.debug("Native quote: price=%d decimals=%d age=%ds", quote.price, decimals, age)
        return quote

    def quote_tokens_for_native(self, native_amount: int, token_decimals: int = 18) -> int:
        """floor(native_amount * 10^token_decimals / price) по текущей котировке."""
        return native_to_tokens(native_amount, self.get_native_price().price, token_decimals)

    def quote_native_for_tokens(self, token_amount: int, token_decimals: int = 18) -> int:
        """floor(token_amount * price / 10^token_decimals) по текущей котировке."""
        return tokens_to_native(token_amount, self.get_native_price().price, token_decimals)
