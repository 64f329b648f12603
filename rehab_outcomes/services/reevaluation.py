"""Re-evaluation batch orchestration."""

from __future__ import annotations

import logging
from typing import Sequence

from rehab_outcomes.errors import NotFoundError
from rehab_outcomes.models.reevaluation import ComparisonBatch, ComparisonItem, CreateReevaluationRequest
from rehab_outcomes.progress.comparator import build_comparison_batch
from rehab_outcomes.services.interfaces import ReevaluationStore

logger = logging.getLogger(__name__)


class ReevaluationService:
    """Computes re-evaluation comparisons and persists them as one batch."""

    def __init__(self, store: ReevaluationStore) -> None:
        self.store = store

    async def perform_reevaluation(
        self,
        clinic_id: str,
        therapist_id: str,
        request: CreateReevaluationRequest,
    ) -> ComparisonBatch:
        """Compare every submitted item and write them atomically.

        Raises:
            ValidationError: empty item list or malformed ``assessed_at``;
                nothing is written.
        """
        batch = build_comparison_batch(request, clinic_id, therapist_id)

        await self.store.create_batch(batch.comparisons)

        logger.info(
            "Re-evaluation performed: batch=%s patient=%s therapist=%s items=%d "
            "improved=%d declined=%d stable=%d mcid_achieved=%d",
            batch.batch_id,
            batch.patient_id,
            therapist_id,
            batch.total_items,
            batch.improved,
            batch.declined,
            batch.stable,
            batch.mcid_achieved,
        )
        return batch

    async def get_history(self, patient_id: str) -> Sequence[ComparisonItem]:
        return await self.store.list_by_patient(patient_id)

    async def get_comparison(self, batch_id: str) -> Sequence[ComparisonItem]:
        items = await self.store.get_batch(batch_id)
        if not items:
            raise NotFoundError("re-evaluation", batch_id)
        return items
