import asyncio
import logging

from rivalry.db import get_session_factory
from rivalry.services.roster import Roster
from rivalry.services.seeding import ensure_roster


async def main():
    async with get_session_factory()() as s:
        await ensure_roster(s, Roster.from_config())
        await s.commit()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
