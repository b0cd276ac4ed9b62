# app/api/auth/services.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.database import Database
from app.core.exceptions import DuplicateEmailError, InvalidCredentialsError
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.utils.datetime_utils import DateTimeUtils


class AuthService:
    """이메일/비밀번호 기반 회원가입, 로그인, 토큰 사용자 확인을 담당합니다."""

    def __init__(self, database: Database):
        self.database = database

    def register_user(self, email: str, password: str, name: str) -> User:
        email = email.strip().lower()
        try:
            with self.database.session_scope() as session:
                exists = session.execute(select(User.id).where(User.email == email)).first()
                if exists:
                    raise DuplicateEmailError("이미 가입된 이메일입니다.")

                user = User(email=email, password_hash=hash_password(password), name=name.strip())
                session.add(user)
                session.flush()
        except IntegrityError as e:
            # 동시 가입으로 unique 제약에 걸린 경우
            raise DuplicateEmailError("이미 가입된 이메일입니다.") from e

        logging.info(f"신규 사용자 가입 완료 (user_id: {user.id})")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """자격 증명을 확인하고 마지막 로그인 시각을 갱신합니다."""
        email = email.strip().lower()
        with self.database.session_scope() as session:
            user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
            if not user or not verify_password(user.password_hash, password):
                raise InvalidCredentialsError("이메일 또는 비밀번호가 올바르지 않습니다.")
            user.last_login = DateTimeUtils.now()

        return user

    def get_user(self, user_id: int) -> Optional[User]:
        with self.database.session_scope() as session:
            return session.get(User, user_id)
