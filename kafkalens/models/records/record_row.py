"""Record row model returned by record queries."""

from pydantic import BaseModel


class RecordRow(BaseModel):
    """One record buffered by the consumption process."""

    partition: int
    offset: int
    timestamp: int | None = None
    key: str | None = None
    payload: str | None = None

    def as_table_row(self) -> tuple[str, ...]:
        """Cells in display column order."""
        return (
            str(self.partition),
            str(self.offset),
            "" if self.timestamp is None else str(self.timestamp),
            self.key or "",
            self.payload or "",
        )
