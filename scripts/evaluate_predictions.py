# scripts/evaluate_predictions.py
from __future__ import annotations

"""Evaluate a batch prediction file against a dataset and its split assignment.

Example
-------
python scripts/evaluate_predictions.py \
    --dataset data/iris.arff --splits data/splits.arff \
    --predictions data/predictions.csv --target class

Prints the evaluation result as JSON. On an evaluation failure the error kind
and message go to stderr and the exit status is 1.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from predeval.api import EvalModel, EvaluationTaskModel, evaluate_prediction_files
from predeval.core.errors import EvaluationError, ReaderError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check a prediction file for completeness and compute its evaluation measures."
    )

    # ---- inputs ----
    parser.add_argument("--dataset", type=str, required=True, help="Dataset (.arff or .csv).")
    parser.add_argument("--splits", type=str, required=True, help="Split assignment (.arff or .csv).")
    parser.add_argument("--predictions", type=str, required=True, help="Predictions (.arff or .csv).")

    # ---- task ----
    parser.add_argument("--target", type=str, required=True, help="Name of the class attribute.")
    parser.add_argument("--procedure", type=str, default="crossvalidation",
                        help="Estimation procedure; 'bootstrapping' enables the in-bag replicate.")
    parser.add_argument("--cost_matrix", type=str, default=None,
                        help="JSON square matrix indexed [true][predicted].")
    parser.add_argument("--classes", type=str, default=None,
                        help="Comma-separated class order for a nominal target read from CSV.")

    # ---- output ----
    parser.add_argument("--decimals", type=int, default=6)
    parser.add_argument("--log_level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        task = EvaluationTaskModel(
            target_feature=args.target,
            estimation_procedure=args.procedure,
            cost_matrix=json.loads(args.cost_matrix) if args.cost_matrix else None,
        )
        eval_cfg = EvalModel(decimals=args.decimals)
    except (ValidationError, json.JSONDecodeError) as e:
        print(f"config: {e}", file=sys.stderr)
        return 2

    nominal = None
    if args.classes:
        nominal = {args.target: [c.strip() for c in args.classes.split(",")]}

    try:
        result = evaluate_prediction_files(
            args.dataset,
            args.splits,
            args.predictions,
            task,
            nominal=nominal,
            eval_cfg=eval_cfg,
        )
    except EvaluationError as e:
        print(f"{e.kind}: {e}", file=sys.stderr)
        return 1
    except (ReaderError, FileNotFoundError) as e:
        print(f"input: {e}", file=sys.stderr)
        return 1

    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
