from enum import StrEnum


# ============================================================
# User Domain
# ============================================================

class UserRole(StrEnum):
    """사용자 역할"""
    CADET = "cadet"      # 교육생
    MENTOR = "mentor"    # 멘토
    BOCAL = "bocal"      # 운영진


# ============================================================
# Mentoring Domain
# ============================================================

class MentoringLogStatus(StrEnum):
    WAITING = "waiting"                # 대기중: 카뎃 신청 직후
    CONFIRMED = "confirmed"            # 예정: 멘토가 일정 확정
    REJECTED = "rejected"              # 취소: 멘토가 거절
    AUTO_CANCELLED = "auto-cancelled"  # 자동취소: 응답 기한 초과
    DONE = "done"                      # 완료: 멘토링 진행됨 (레포트 작성 가능)


class MailType(StrEnum):
    """멘토링 로그 단위로 발송되는 메일 종류"""
    RESERVATION = "Reservation"          # 카뎃 신청 → 멘토
    APPROVE_TO_CADET = "ApproveToCadet"  # 일정 확정 → 카뎃
    CANCEL_TO_CADET = "CancelToCadet"    # 거절/자동취소 → 카뎃


# ============================================================
# Report Domain
# ============================================================

class ReportStatus(StrEnum):
    DRAFTING = "drafting"    # 작성중
    SUBMITTED = "submitted"  # 작성완료 (정산 확정, 수정 불가)
