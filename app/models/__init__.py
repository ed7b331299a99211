"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every table with Base.metadata,
which Alembic and relationship resolution rely on.

Modules:
    user: 사용자 및 역할 열거형 (User and UserRole)
    store: 매장 (Store)
    rating: 평점 (Rating)
"""

from app.models.user import User, UserRole
from app.models.store import Store
from app.models.rating import Rating
