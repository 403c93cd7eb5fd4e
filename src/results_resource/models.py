"""
Request and response envelopes exchanged with the pipeline over stdin/stdout.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Version(BaseModel):
    """Opaque marker handed back to the pipeline. Wraps a storage key."""

    key: str = Field(default="", description="Storage key of the archive")

    def is_empty(self) -> bool:
        return not self.key


class Source(BaseModel):
    """Resource ``source`` block from the pipeline configuration."""

    storage_type: str = Field(default="s3", description="Backend: s3, gcs, azure or local")
    storage_config: Dict[str, Any] = Field(
        default_factory=dict, description="Backend-specific settings"
    )


class Summary(BaseModel):
    """A summary to render over the most recent fetched archives."""

    type: str = Field(..., description="Summary kind understood by junit-viewer")
    limit: int = Field(
        default=0, ge=0, description="Most recent archives to consider, 0 for all"
    )


class InParams(BaseModel):
    summaries: List[Summary] = Field(default_factory=list)


class CheckRequest(BaseModel):
    source: Source = Field(default_factory=Source)
    version: Optional[Version] = Field(
        default=None, description="Last seen version, absent on first check"
    )

    def starting_version(self) -> Optional[Version]:
        if self.version is None or self.version.is_empty():
            return None
        return self.version


class InRequest(BaseModel):
    source: Source = Field(default_factory=Source)
    version: Version
    params: InParams = Field(default_factory=InParams)
    output_dir: str = Field(
        default="", exclude=True, description="Destination dir, taken from argv"
    )


class InResponse(BaseModel):
    version: Version
    metadata: Dict[str, str] = Field(default_factory=dict)
