"""
Test Suite for the Mentoring backend

멘토링 신청/확정/자동취소, 레포트 작성/제출, 멘토 정산 계산,
메일 포트와 HTTP 라우터를 검증한다.
"""
