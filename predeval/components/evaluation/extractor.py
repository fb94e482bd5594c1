from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from predeval.components.interfaces import MetricsEngine
from predeval.contracts.results import MetricRecord
from predeval.contracts.task_configs import EvalModel
from predeval.core.errors import NumericError

from .accumulator import Accumulator
from .aggregator import IN_BAG, OUT_OF_BAG, EvaluationAggregator
from .formatting import format_array, format_score
from .partitions import PartitionKey
from .task_kind import LEARNING_CURVE
from .types import MetricContext, MetricScore

logger = logging.getLogger(__name__)

# metrics reported from the out-of-bag replicate only, never blended
_UNBLENDED = {"number_of_instances"}


def combine_bootstrap(
    out_of_bag: Dict[str, MetricScore],
    in_bag: Dict[str, MetricScore],
    *,
    weight: float = 0.632,
) -> Dict[str, MetricScore]:
    """Blend replicate scores into the .632 bootstrap estimate.

    ``weight`` applies to the out-of-bag score and ``1 - weight`` to the in-bag
    one. Metrics missing from the in-bag replicate keep their out-of-bag value.
    """

    out: Dict[str, MetricScore] = {}
    for name, oob in out_of_bag.items():
        ib = in_bag.get(name)
        if ib is None or name in _UNBLENDED or oob.value is None or ib.value is None:
            out[name] = oob
            continue

        value = weight * float(oob.value) + (1.0 - weight) * float(ib.value)
        array = None
        if oob.array is not None and ib.array is not None:
            array = weight * np.asarray(oob.array, dtype=float) + (1.0 - weight) * np.asarray(
                ib.array, dtype=float
            )
        out[name] = MetricScore(value, array)
    return out


class MetricExtractor:
    """Turn validated accumulators into a filtered, tagged list of metric records."""

    def __init__(self, engine: MetricsEngine, cfg: Optional[EvalModel] = None) -> None:
        self.engine = engine
        self.cfg = cfg or EvalModel()

    def scores(self, replicates: Sequence[Accumulator], context: MetricContext) -> Dict[str, MetricScore]:
        oob = self.engine.compute(replicates[OUT_OF_BAG], context)
        if len(replicates) > IN_BAG and len(replicates[IN_BAG]) > 0:
            in_bag = self.engine.compute(replicates[IN_BAG], context)
            return combine_bootstrap(oob, in_bag, weight=self.cfg.bootstrap_weight)
        return oob

    def to_records(
        self,
        scores: Dict[str, MetricScore],
        *,
        key: Optional[PartitionKey] = None,
        sample_size: Optional[int] = None,
        learning_curve: bool = False,
    ) -> List[MetricRecord]:
        records: List[MetricRecord] = []
        for name, score in scores.items():
            try:
                value = format_score(name, score.value, self.cfg.decimals)
            except NumericError as e:
                # e.g. AUC of a single-class partition, or a zero-variance fold
                logger.debug("Dropping %s at %s: %s", name, key or "global", e)
                continue

            coords = {}
            if key is not None:
                coords = {"repeat": key.repeat, "fold": key.fold}
                if learning_curve:
                    coords.update(sample=key.sample, sample_size=sample_size)

            records.append(
                MetricRecord(
                    name=name,
                    value=value,
                    array_data=format_array(score.array, self.cfg.decimals),
                    **coords,
                )
            )
        return records

    def extract(self, aggregator: EvaluationAggregator) -> List[MetricRecord]:
        context = aggregator.metric_context()
        learning_curve = aggregator.task_kind == LEARNING_CURVE

        records = self.to_records(self.scores(aggregator.global_accumulators(), context))

        for key, replicates in aggregator.partition_accumulators():
            sample_size = None
            if learning_curve:
                sample_size = aggregator.counter.get_shadow_type_size(key.repeat, key.fold, key.sample)
            records.extend(
                self.to_records(
                    self.scores(replicates, context),
                    key=key,
                    sample_size=sample_size,
                    learning_curve=learning_curve,
                )
            )

        aggregator.mark_extracted()
        logger.info("Extracted %d metric records", len(records))
        return records
