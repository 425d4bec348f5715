from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
import logging

from sqlalchemy import event, Engine, Result, CursorResult
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import Session

import config
from enums.change_event_type import ChangeEventType
from models.base import Base
from utils.change_feed import ChangeFeed, RowChangeEvent
"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.order import Order, OrderDTO
from models.orderItem import OrderItem

logger = logging.getLogger(__name__)

# Tables whose committed changes are pushed to subscribers, with the DTO used as row state
OBSERVED_MODELS = {
    Order: OrderDTO,
}

PENDING_CHANGES_KEY = "pending_row_changes"
CHANGE_FEED_KEY = "change_feed"

if config.DB_URL.startswith("sqlite+aiosqlite:///data/"):
    data_folder = Path("data")
    if data_folder.exists() is False:
        data_folder.mkdir()

engine = create_async_engine(config.DB_URL, echo=False)
session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Process-wide feed; a session may carry its own via session.info["change_feed"]
change_feed = ChangeFeed()


@asynccontextmanager
async def get_db_session() -> AsyncSession:
    async with session_maker() as session:
        yield session


async def session_execute(stmt, session: AsyncSession) -> Result[Any] | CursorResult[Any]:
    return await session.execute(stmt)


async def session_flush(session: AsyncSession) -> None:
    await session.flush()


async def session_commit(session: AsyncSession) -> None:
    await session.commit()


async def session_refresh(session: AsyncSession, instance) -> None:
    await session.refresh(instance)


async def session_rollback(session: AsyncSession) -> None:
    await session.rollback()


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(Session, "after_flush")
def collect_row_changes(session: Session, flush_context):
    # new/dirty still hold the pre-flush state here, primary keys are already assigned
    pending = session.info.setdefault(PENDING_CHANGES_KEY, [])
    for instance in session.new:
        dto_class = OBSERVED_MODELS.get(type(instance))
        if dto_class is not None:
            pending.append(RowChangeEvent(
                table=instance.__tablename__,
                event_type=ChangeEventType.INSERT,
                new=dto_class.model_validate(instance, from_attributes=True)
            ))
    for instance in session.dirty:
        dto_class = OBSERVED_MODELS.get(type(instance))
        if dto_class is not None and session.is_modified(instance):
            pending.append(RowChangeEvent(
                table=instance.__tablename__,
                event_type=ChangeEventType.UPDATE,
                new=dto_class.model_validate(instance, from_attributes=True)
            ))


@event.listens_for(Session, "after_commit")
def publish_row_changes(session: Session):
    pending = session.info.pop(PENDING_CHANGES_KEY, [])
    if not pending:
        return
    feed = session.info.get(CHANGE_FEED_KEY, change_feed)
    for row_change in pending:
        feed.publish(row_change)


@event.listens_for(Session, "after_rollback")
def discard_row_changes(session: Session):
    dropped = session.info.pop(PENDING_CHANGES_KEY, [])
    if dropped:
        logger.debug(f"Discarded {len(dropped)} unpublished row change(s) after rollback")


async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
