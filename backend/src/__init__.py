"""
Mentoring - 멘토링 신청/확정 및 멘토 정산 시스템

공통 모듈(common)을 통해 DB 연결, 설정, 메일/스토리지 포트를 중앙에서 관리합니다.
도메인 패키지: user, mentoring, report
"""
