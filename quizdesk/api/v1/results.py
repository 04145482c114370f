from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.db.session import get_db
from quizdesk.dependencies import get_result_ledger
from quizdesk.schemas.result_schema import ResultListItem, RankingEntry
from quizdesk.services.result_ledger import ResultLedger

router = APIRouter()


@router.get("", response_model=List[ResultListItem])
async def list_results(
        db: AsyncSession = Depends(get_db),
        ledger: ResultLedger = Depends(get_result_ledger)
):
    """Every recorded submission, newest first"""
    return await ledger.list_results(db)


@router.get("/ranking", response_model=List[RankingEntry])
async def class_ranking(
        class_id: int = Query(..., gt=0),
        db: AsyncSession = Depends(get_db),
        ledger: ResultLedger = Depends(get_result_ledger)
):
    """
    Ranking of a class

    Args:
        class_id: Class whose learners are ranked, by score then fastest time
    """
    return await ledger.ranking(db, class_id)
