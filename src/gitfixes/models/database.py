"""Data models for persisted commit and ownership databases."""

from pydantic import BaseModel, Field


class KnownCommitEntry(BaseModel):
    """One row of the known-commit database."""

    commit_id: str = Field(..., description="Lowercase full or abbreviated SHA")
    owner: str = Field("", description="Owner of the catalogued commit")
    source_path: str = Field("", description="Path the commit was catalogued from, e.g. a patch file")

    def to_line(self) -> str:
        """Render the entry in the database's ``id,owner,path`` format."""
        fields = [self.commit_id, self.owner]
        if self.source_path:
            fields.append(self.source_path)
        return ",".join(fields)


class OwnerCount(BaseModel):
    """Number of contributions a person made to a path."""

    name: str = Field(..., description="Name or email of the contributor")
    count: int = Field(0, description="Number of contributions")
