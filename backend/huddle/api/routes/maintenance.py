"""Maintenance Routes — on-demand cross-concept reconciliation."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.infrastructure.database import get_db
from huddle.services.synchronize import Synchronizations

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"])


@router.post("/reconcile")
async def reconcile(db: AsyncSession = Depends(get_db)):
    """Repair dangling post links and stale open goals; report unlinked posts."""
    return await Synchronizations(db).reconcile()
