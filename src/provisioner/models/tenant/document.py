"""Document embedding model.

The ``embedding`` vector column and its index are not declared here; they are
added by the optional vector step once the extension is known to exist.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field

from src.provisioner.models.base import utc_now
from src.provisioner.models.tenant.base import TenantSQLModel


class DocumentEmbedding(TenantSQLModel, table=True):
    __tablename__ = "document_embeddings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dataroom_id: UUID = Field(foreign_key="datarooms.id", index=True)
    document_id: str = Field(max_length=255, index=True)
    chunk_index: int = Field(default=0)
    content: str
    created_at: datetime = Field(default_factory=utc_now)
