"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
IssueService applies the validation and completion rules and drives the
repository; Aggregator computes status statistics on demand.
"""
