import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Player
from .roster import Roster

logger = logging.getLogger(__name__)


async def ensure_roster(session: AsyncSession, roster: Roster) -> list[Player]:
    """Create a zeroed player for every roster role that has none yet.

    Existing players are left alone, including their names. Nothing is
    committed here.
    """

    existing = {
        p.role: p for p in (await session.execute(select(Player))).scalars().all()
    }
    created: list[Player] = []
    for role, name in roster.items():
        player = existing.get(role.value)
        if player is not None:
            if player.name != name:
                logger.warning(
                    "Player for role %s is named %r, configured name is %r; keeping stored name",
                    role.value,
                    player.name,
                    name,
                )
            continue
        player = Player(id=uuid.uuid4().hex, name=name, role=role.value)
        session.add(player)
        created.append(player)

    if created:
        await session.flush()
        logger.info("Seeded players: %s", ", ".join(p.name for p in created))
    else:
        logger.info("Found %d existing player(s); skipping seed", len(existing))
    return created
