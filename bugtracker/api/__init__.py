"""API 라우터 패키지 — REST 엔드포인트, HTML 페이지, 예외 핸들러.

API package — REST endpoints, HTML pages and global error handlers.
"""
