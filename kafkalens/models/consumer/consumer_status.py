"""Consumer process models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kafkalens.constants.enums import ConsumeFrom


class ConsumerStatus(BaseModel):
    """Last-polled snapshot of a backend consumption process."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_running: bool = Field(default=False, alias="isRunning")
    record_count: int = Field(default=0, ge=0, alias="recordCount")


class ConsumerConfig(BaseModel):
    """Settings sent with a start request."""

    model_config = ConfigDict(populate_by_name=True)

    consume_from: ConsumeFrom = Field(default=ConsumeFrom.BEGINNING, alias="from")
    timestamp_ms: int | None = Field(default=None, ge=0, alias="timestamp")

    @model_validator(mode="after")
    def _require_timestamp(self) -> "ConsumerConfig":
        if self.consume_from is ConsumeFrom.TIMESTAMP and self.timestamp_ms is None:
            raise ValueError("timestamp_ms is required when consuming from a timestamp")
        return self

    def to_payload(self) -> dict[str, object]:
        """Serialize with backend field names."""
        return self.model_dump(mode="json", by_alias=True)
