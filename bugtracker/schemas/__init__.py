"""Pydantic 요청 스키마 패키지 — Request schema package."""
