"""Pydantic models for stamping run results."""

from pydantic import BaseModel, Field


class DocumentStampOutcome(BaseModel):
    """Result of stamping one document during a vault run."""

    rel_path: str = Field(..., description="Document path relative to the vault root")
    added_count: int = Field(0, description="Stamps added to this document")
    written: bool = Field(False, description="Whether the document was rewritten")
    error: str | None = Field(None, description="Failure message if the document could not be processed")


class CorpusStampSummary(BaseModel):
    """Aggregate result of a vault-wide stamping run."""

    total_documents: int = Field(..., description="Documents found in the vault")
    processed_count: int = Field(0, description="Documents processed, failed ones included")
    added_count: int = Field(0, description="Stamps added across all documents")
    batches: int = Field(0, description="Number of batches run")
    failed_paths: list[str] = Field(default_factory=list, description="Documents that failed to read or write")
    error: str | None = Field(None, description="Run-level failure that stopped processing early")

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed_paths
