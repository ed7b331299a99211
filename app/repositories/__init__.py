"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer for users, stores and ratings.
BaseRepository supplies id lookup and CRUD; store and rating repositories
add the GROUP BY queries behind average ratings, counts and distributions.
"""
