import asyncio
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
import typer
from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

import vardict.db_models # noqa: F401

from vardict.database import async_session_factory
from vardict.dictionary import service as dictionary_service
from vardict.dictionary.models import SearchHistory, VariableMapping
from vardict.dictionary.schemas import MappingOut
from vardict.dictionary.seed import items_from_json, seed_items
from vardict.activity.models import DailyStats, UserActivity
from vardict.suggestions.models import RAGSuggestionLog

cli = typer.Typer()

BACKUP_ROW_LIMIT = 10000


def _row_to_dict(row) -> dict:
    """ORM 객체를 JSON 직렬화 가능한 dict로 변환"""
    data = {}
    # 속성명과 컬럼명이 다른 경우(UserActivity.extra → metadata)가 있어 mapper 기준으로 순회
    for attr in inspect(row).mapper.column_attrs:
        value = getattr(row, attr.key)
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        data[attr.columns[0].name] = value
    return data


async def build_backup(db: AsyncSession, *, days: int = 30) -> dict:
    """매핑/일별 통계는 전체, 로그성 테이블은 최근 N일 (테이블당 최대 10000건)"""
    since = datetime.now(timezone.utc) - timedelta(days=days)

    async def recent(model):
        stmt = (
            select(model)
            .where(model.created_at >= since)
            .order_by(model.created_at.desc())
            .limit(BACKUP_ROW_LIMIT)
        )
        return (await db.execute(stmt)).scalars().all()

    mappings = (await db.execute(select(VariableMapping).order_by(VariableMapping.created_at.desc()))).scalars().all()
    history = await recent(SearchHistory)
    rag_logs = await recent(RAGSuggestionLog)
    activities = await recent(UserActivity)
    daily_stats = (await db.execute(select(DailyStats).order_by(DailyStats.date.desc()))).scalars().all()

    return {
        "metadata": {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": "1.0",
            "counts": {
                "variable_mappings": len(mappings),
                "search_history": len(history),
                "rag_suggestion_logs": len(rag_logs),
                "user_activities": len(activities),
                "daily_stats": len(daily_stats),
            },
        },
        "data": {
            "variable_mappings": [MappingOut.model_validate(m).model_dump() for m in mappings],
            "search_history": [_row_to_dict(r) for r in history],
            "rag_suggestion_logs": [_row_to_dict(r) for r in rag_logs],
            "user_activities": [_row_to_dict(r) for r in activities],
            "daily_stats": [_row_to_dict(r) for r in daily_stats],
        },
    }


@cli.command(name="seed-dictionary")
def seed_dictionary():
    """
    Inserts the built-in Korean/English seed mappings. Existing pairs are skipped.
    """
    async def runner():
        async with async_session_factory() as session:
            result = await dictionary_service.bulk_import(session, seed_items(), mode="skip")
            print(f"✅ Seed finished: created={result.created}, skipped={result.skipped}, total={result.total}")

    asyncio.run(runner())


@cli.command(name="import-dictionary")
def import_dictionary(
    file: str = typer.Option(..., "--file", "-f", help="Path to JSON file containing mappings"),
    mode: str = typer.Option("error", "--mode", help="On conflict, either 'error' or 'skip'"),
    clear: bool = typer.Option(False, "--clear", help="Delete all existing mappings first"),
):
    """
    Import dictionary mappings from a JSON file.

    Supported JSON formats:
    - { "items": [ {"korean":"주문","english":"order","type":"변수","tags":"주문,order"}, ... ] }
    - [ {"korean":"...","english":"..."}, ... ]
    """
    file_path = Path(file)
    if not file_path.exists():
        print(f"❌ File not found: {file}")
        raise typer.Exit(code=1)

    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
        items = items_from_json(payload)
    except Exception as e:
        print(f"❌ Failed to read/parse JSON: {e}")
        raise typer.Exit(code=1)

    async def runner():
        async with async_session_factory() as session:
            if clear:
                deleted = await dictionary_service.delete_all(session)
                print(f"🗑️  Deleted {deleted} existing mappings")
            result = await dictionary_service.bulk_import(session, items, mode=mode)
            print(f"✅ Import finished: created={result.created}, skipped={result.skipped}, total={result.total}")
            if result.details:
                for error in result.details.get("errors", []):
                    print(f"⚠️  {error}")

    asyncio.run(runner())


@cli.command()
def backup(
    output: str = typer.Option(..., "--output", "-o", help="Path of the JSON backup file to write"),
    days: int = typer.Option(30, "--days", help="How many days of log tables to include"),
):
    """
    Dumps mappings, recent logs and daily stats to a JSON file.
    """
    async def runner():
        async with async_session_factory() as session:
            return await build_backup(session, days=days)

    snapshot = asyncio.run(runner())
    raw = json.dumps(snapshot, ensure_ascii=False, indent=2)
    Path(output).write_text(raw, encoding="utf-8")
    size_mb = len(raw.encode("utf-8")) / 1024 / 1024
    print(f"✅ Backup completed: {snapshot['metadata']['counts']} ({size_mb:.2f} MB) → {output}")


if __name__ == "__main__":
    cli()
