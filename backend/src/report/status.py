from backend.src.common.enums import ReportStatus


class ReportStatusValidator:
    """레포트 수정 가능 여부 판단. 작성중(drafting)일 때만 수정할 수 있다."""

    def __init__(self, status: ReportStatus | str | None) -> None:
        self.status = status

    def verify(self) -> bool:
        return self.status == ReportStatus.DRAFTING
