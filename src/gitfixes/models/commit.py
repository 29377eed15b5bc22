"""Data models for walked commits and fix matches."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Reference(BaseModel):
    """A candidate commit reference found in a commit message."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Hex-like token as written in the message")
    is_explicit_fix_tag: bool = Field(False, description="Whether the token was on a 'Fixes:' line")


class ParsedCommit(BaseModel):
    """A commit message broken down into the parts the fix pipeline cares about."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "4f6c3b1e8d2a9c7b5e0f1a3d6c8b2e4f7a9d1c3b",
                "subject": "net: fix use-after-free in foo_remove()",
                "stable": True,
                "references": [{"token": "a1b2c3d4e5f6", "is_explicit_fix_tag": True}],
            }
        },
    )

    id: str = Field(..., description="Full commit SHA hash")
    subject: str = Field("", description="First non-empty line of the message")
    stable: bool = Field(False, description="Whether the message carries a stable marker")
    references: List[Reference] = Field(default_factory=list, description="Candidate references in message order")


class WalkedCommit(BaseModel):
    """A commit as yielded by a repository walk."""

    hash: str = Field(..., description="Full commit SHA hash")
    message: str = Field("", description="Full commit message")
    author_email: str = Field("", description="Author email")
    committer_email: str = Field("", description="Committer email")
    parent_hashes: List[str] = Field(default_factory=list, description="Parent commit hashes")

    @property
    def is_root(self) -> bool:
        return not self.parent_hashes


class MatchResult(BaseModel):
    """A walked commit that fixes a catalogued commit."""

    commit_id: str = Field(..., description="Full SHA of the fixing commit")
    subject: str = Field(..., description="Subject of the fixing commit")
    owner: str = Field("", description="Owner the fix is routed to")
    stable: bool = Field(False, description="Whether the fix carries a stable marker")
    source_path: str = Field("", description="Path recorded for the fixed commit in the database")
    fixed_id: str = Field("", description="Full SHA of the commit being fixed")

    @property
    def short_id(self) -> str:
        return self.commit_id[:12]
