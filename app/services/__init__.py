"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer for auth, users, stores, ratings
and the dashboard. Every service asks authorization_service for a decision
before touching a repository; routers only commit.
"""
