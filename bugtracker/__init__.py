"""버그 트래커 — REST API와 HTML 화면을 갖춘 이슈 트래커.

Bug tracker — issue-tracking CRUD service with a REST API and HTML pages.
"""
