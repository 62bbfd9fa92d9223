"""검증기 패키지 — 저장 전 요청 페이로드 검증.

Validators package — Pure payload validation before anything reaches storage.
"""
