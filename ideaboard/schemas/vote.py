"""Vote toggle schemas."""

from typing import List, Literal

from ideaboard.schemas.common import ApiModel


class VoteToggle(ApiModel):
    idea_id: int


class VoteResult(ApiModel):
    message: str
    action: Literal["added", "removed"]
    voted: bool
    idea_id: int
    vote_count: int


class VotedIdeas(ApiModel):
    idea_ids: List[int]
