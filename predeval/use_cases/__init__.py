from .evaluate_predictions import evaluate_batch_predictions, evaluate_prediction_files

__all__ = [
    "evaluate_batch_predictions",
    "evaluate_prediction_files",
]
