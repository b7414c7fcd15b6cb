from __future__ import annotations

from datetime import date, datetime
from typing import Iterator, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .config import DATABASE_URL, SQL_ECHO


class Base(DeclarativeBase):
    pass


class Hospital(Base):
    __tablename__ = "hospitals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), unique=True)
    base_due_day: Mapped[int] = mapped_column(Integer)
    # 상위노출 지정 일자 (최대 5개, 예: [3, 10, 17])
    sanwi_nosul_days: Mapped[List[int]] = mapped_column(JSON, default=list)
    color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class MonthlyTask(Base):
    __tablename__ = "monthly_tasks"
    __table_args__ = (UniqueConstraint("hospital_id", "year", "month"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hospital_id: Mapped[int] = mapped_column(
        ForeignKey("hospitals.id", ondelete="CASCADE"), index=True)
    year: Mapped[int] = mapped_column(Integer)
    month: Mapped[int] = mapped_column(Integer)
    sanwi_nosul: Mapped[int] = mapped_column(Integer, default=0)
    brand: Mapped[int] = mapped_column(Integer, default=0)
    trend: Mapped[int] = mapped_column(Integer, default=0)
    eonron_bodo: Mapped[int] = mapped_column(Integer, default=0)
    jisikin: Mapped[int] = mapped_column(Integer, default=0)
    forum_post: Mapped[int] = mapped_column(Integer, default=0)
    deadline_pull_days: Mapped[int] = mapped_column(Integer, default=0)
    brand_order: Mapped[int] = mapped_column(Integer, default=1)
    trend_order: Mapped[int] = mapped_column(Integer, default=2)
    work_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    work_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class Vacation(Base):
    __tablename__ = "vacations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vacation_date: Mapped[date] = mapped_column(Date, unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class Schedule(Base):
    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hospital_id: Mapped[int] = mapped_column(
        ForeignKey("hospitals.id", ondelete="CASCADE"), index=True)
    year: Mapped[int] = mapped_column(Integer, index=True)
    month: Mapped[int] = mapped_column(Integer, index=True)
    task_date: Mapped[date] = mapped_column(Date, index=True)
    task_type: Mapped[str] = mapped_column(String(32))
    task_name: Mapped[str] = mapped_column(String(128))
    start_time: Mapped[str] = mapped_column(String(5))   # "HH:MM"
    end_time: Mapped[str] = mapped_column(String(5))
    duration_hours: Mapped[float] = mapped_column(Float)
    is_report: Mapped[bool] = mapped_column(Boolean, default=False)
    sequence: Mapped[int] = mapped_column(Integer, default=0)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


def make_engine(url: str = DATABASE_URL) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=SQL_ECHO, connect_args=connect_args)


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Optional[Engine] = None) -> None:
    Base.metadata.create_all(bind=bind or engine)


def get_session() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
