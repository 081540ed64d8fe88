"""Team creation and lookup."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from pr_reviewers.domain.entities import Team, User
from pr_reviewers.domain.errors import (
    TeamExistsError,
    TeamNotFoundError,
    TransactionRequiredError,
)
from pr_reviewers.domain.types import TeamName
from pr_reviewers.services.ports import TeamRepository, TransactionManager, UserRepository

logger = logging.getLogger(__name__)


class TeamService:
    def __init__(
        self,
        teams: TeamRepository,
        users: UserRepository,
        transactions: TransactionManager | None,
    ) -> None:
        self._teams = teams
        self._users = users
        self._transactions = transactions

    async def create(self, team_name: TeamName, members: Sequence[User]) -> tuple[Team, list[User]]:
        """Create a team and upsert its members in one transaction.

        Members that already exist elsewhere are moved into this team and
        take the supplied username and active flag.

        Returns:
            The team and its members as stored after the upsert.

        Raises:
            TeamExistsError: The name is already taken.
        """
        if self._transactions is None:
            raise TransactionRequiredError()

        async def _create() -> tuple[Team, list[User]]:
            try:
                await self._teams.get_by_name(team_name)
            except TeamNotFoundError:
                pass
            else:
                raise TeamExistsError(team_name)

            team = Team(name=team_name)
            await self._teams.create(team)
            await self._users.upsert_members(team_name, members)
            return team, await self._users.get_users_by_team(team_name)

        team, stored_members = await self._transactions.run(_create)
        logger.info("✅ Created team %s with %d members", team_name, len(stored_members))
        return team, stored_members

    async def get_by_name(self, team_name: TeamName) -> tuple[Team, list[User]]:
        """Raises ``TeamNotFoundError`` if the team does not exist."""
        team = await self._teams.get_by_name(team_name)
        members = await self._users.get_users_by_team(team_name)
        return team, members
