"""HTTP 미들웨어 패키지 — HTTP middleware package."""
