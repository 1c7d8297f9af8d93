"""FastAPI dependencies wiring request handlers to services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_mail_config, get_settings
from ..db import get_db
from ..export.workbook import ExportFormats
from ..notifications.mailer import ReportMailer
from ..records.directory import SqlUserDirectory, UserDirectory
from ..records.rate_limit import RateLimiter
from ..records.store import RecordStore
from ..reporting.document import ReportGenerator
from ..storage import StorageClient, get_storage

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_record_store(db: DbSession) -> RecordStore:
    return RecordStore(db)


Store = Annotated[RecordStore, Depends(get_record_store)]


async def get_rate_limiter(store: Store) -> RateLimiter:
    settings = get_settings()
    return RateLimiter(
        store,
        limit=settings.daily_submission_limit,
        window=settings.rate_limit_window,
    )


async def get_user_directory(db: DbSession) -> UserDirectory:
    return SqlUserDirectory(db)


@lru_cache
def get_report_generator() -> ReportGenerator:
    return ReportGenerator.from_settings(get_settings())


@lru_cache
def get_mailer() -> ReportMailer:
    return ReportMailer(get_mail_config())


def get_export_formats() -> ExportFormats:
    return ExportFormats.from_settings(get_settings())


def get_photo_storage() -> StorageClient:
    return get_storage()


Limiter = Annotated[RateLimiter, Depends(get_rate_limiter)]
Directory = Annotated[UserDirectory, Depends(get_user_directory)]
Reports = Annotated[ReportGenerator, Depends(get_report_generator)]
Mailer = Annotated[ReportMailer, Depends(get_mailer)]
Formats = Annotated[ExportFormats, Depends(get_export_formats)]
PhotoStorage = Annotated[StorageClient, Depends(get_photo_storage)]
