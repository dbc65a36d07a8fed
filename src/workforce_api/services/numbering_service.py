"""Business key generation."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.config import get_settings
from workforce_api.models.orm.numbering import NumberingRuleORM
from workforce_api.repositories.numbering_repository import NumberingRepository

logger = logging.getLogger(__name__)

EMPLOYEE_ENTITY = "employee"


def format_number(prefix: str, padding: int, number: int) -> str:
    """``prefix`` followed by the number zero-padded to ``padding`` digits."""
    return f"{prefix}{number:0{padding}d}"


class NumberingService:
    """Hands out sequential business keys.

    The counter row is locked for the rest of the transaction, so two
    concurrent creations cannot receive the same number.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repo = NumberingRepository(session)

    async def next_number(self, entity: str = EMPLOYEE_ENTITY) -> str:
        """Reserve the next number of an entity's sequence.

        The rule is created with the configured prefix and padding the first
        time a sequence is used.
        """
        rule = await self.repo.get_for_update(entity)
        if rule is None:
            settings = get_settings()
            rule = NumberingRuleORM(
                entity=entity,
                prefix=settings.employee_number_prefix,
                padding=settings.employee_number_padding,
                next_number=1,
            )
            self.session.add(rule)
            await self.session.flush()
            logger.info(f"Created numbering rule for {entity}")

        value = format_number(rule.prefix, rule.padding, rule.next_number)
        rule.next_number += 1
        await self.session.flush()
        return value
