"""공용 유틸리티 패키지 — 검증, 예외, 페이지네이션, 로깅 설정.

Shared utilities — validation, exceptions, pagination, logging setup.
"""
