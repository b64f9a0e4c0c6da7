# ==============================================
# VotingCandidate — example Element subclass
# ==============================================
#
# Fixes the identifier scheme ("candidate_<name>") and the initial
# state ({"votes": 0}), and adds typed accessors over "votes".
#
# vote_for() reads then writes. The two steps are separate store
# calls, so concurrent voters on the same candidate can both read
# the same count and one vote is lost. That is the last-writer-wins
# model of Element, not something this class tries to fix.
#
# ==============================================

from elementstore.element import Element
from elementstore.metadata import default_registry
from elementstore.storage.base import StorageAdapter

IDENTIFIER_PREFIX = "candidate_"


@default_registry.register
class VotingCandidate(Element):
    candidate_name: str

    def __init__(self, candidate_name: str, *, store: StorageAdapter):
        super().__init__(f"{IDENTIFIER_PREFIX}{candidate_name}", {"votes": 0}, store=store)
        self.candidate_name = candidate_name

    async def get_candidate_name(self) -> str:
        return self.candidate_name

    get_name = get_candidate_name

    async def get_votes(self) -> int:
        """Current vote count, refreshed from the store."""
        state = await self.get_state()
        return state["votes"]

    async def vote_for(self) -> None:
        current_votes = await self.get_votes()
        await self.update({"votes": current_votes + 1})

    increment = vote_for
