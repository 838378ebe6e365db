from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from expiry_notifier.models.records import ScanResult, ScanStatus


class ScanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status: ScanStatus
    message: str
    sent_count: int = Field(0, alias="sentCount")
    total_candidates: int = Field(0, alias="totalCandidates")
    skipped_items: int = Field(0, alias="skippedItems")
    detail: Optional[str] = None

    @classmethod
    def from_result(cls, result: ScanResult) -> "ScanResponse":
        return cls(
            success=result.success,
            status=result.status,
            message=_MESSAGES[result.status].format(sent=result.sent_count, total=result.total_candidates),
            sent_count=result.sent_count,
            total_candidates=result.total_candidates,
            skipped_items=result.skipped_items,
            detail=result.detail,
        )


_MESSAGES = {
    ScanStatus.NO_ITEMS: "No items expiring tomorrow.",
    ScanStatus.NO_RECIPIENTS: "Found items but no valid users/tokens found.",
    ScanStatus.DISPATCHED: "Đã xử lý xong. Gửi thành công tới {sent}/{total} users.",
    ScanStatus.INTERNAL_ERROR: "Internal Server Error",
}
