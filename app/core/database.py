# app/core/database.py
#   관계형 DB 엔진과 세션 수명을 관리합니다.
#   전역 커넥션 풀 대신 create_app에서 Database 인스턴스를 한 번 생성하고
#   각 서비스에 주입합니다.
import logging
from contextlib import contextmanager

from sqlalchemy import JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# 선언형 모델의 Base
Base = declarative_base()

# PostgreSQL에서는 JSONB, 그 외(SQLite 테스트)에서는 일반 JSON 컬럼을 사용합니다.
JSONType = JSON().with_variant(JSONB(), 'postgresql')


class Database:
    """엔진과 세션 팩토리를 보관하는 저장소 핸들."""

    def __init__(self, url: str, echo: bool = False):
        engine_kwargs = {'echo': echo, 'future': True}
        if url.startswith('sqlite'):
            # 인메모리 SQLite는 모든 스레드가 하나의 커넥션을 공유해야 합니다.
            engine_kwargs['connect_args'] = {'check_same_thread': False}
            if url in ('sqlite://', 'sqlite:///:memory:'):
                engine_kwargs['poolclass'] = StaticPool
        else:
            engine_kwargs['pool_pre_ping'] = True

        self.engine = create_engine(url, **engine_kwargs)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    @contextmanager
    def session_scope(self):
        """
        하나의 작업 단위에 대한 세션을 제공합니다.

        정상 종료 시 커밋, 예외 발생 시 롤백 후 예외를 다시 던지며,
        어떤 경로로 빠져나가든 세션은 반드시 닫힙니다.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self):
        """모델에 정의된 테이블이 없으면 생성합니다."""
        # 모든 모델이 Base.metadata에 등록되도록 임포트합니다.
        from app import models  # noqa: F401
        Base.metadata.create_all(self.engine)
        logging.info("Database: 테이블 생성/확인 완료")

    def dispose(self):
        self.engine.dispose()
