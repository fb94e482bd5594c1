import logging

import pandas as pd
import pytest

from predeval.api import evaluate_batch_predictions, evaluate_prediction_files
from predeval.components.evaluation.partitions import SplitAssignment
from predeval.contracts.task_configs import EvaluationTaskModel
from predeval.core.errors import CountMismatch, RowOutOfRange, SchemaError


class TestClassification:
    def test_complete_predictions(self, yes_no_dataset, two_fold_splits, correct_predictions, class_task):
        result = evaluate_batch_predictions(yes_no_dataset, two_fold_splits, correct_predictions, class_task)
        assert result.task_kind == "classification"
        assert result.n_predictions == 4
        assert result.dimensions == {"repeats": 1, "folds": 2, "samples": 1}
        assert result.get("predictive_accuracy").value == "1"
        assert result.get("number_of_instances").value == "4"
        assert result.get("mean_absolute_error").value == "0.15"
        assert result.get("root_mean_squared_error").value == "0.158114"
        auc = result.get("area_under_roc_curve")
        assert auc.value == "1"
        assert auc.array_data == "[1,1]"
        assert result.get("total_cost") is None

        fold_1 = result.get("number_of_instances", repeat=0, fold=1)
        assert fold_1.value == "2"
        assert fold_1.sample is None
        assert fold_1.sample_size is None

    def test_missing_prediction(self, yes_no_dataset, two_fold_splits, correct_predictions, class_task):
        partial = correct_predictions[correct_predictions["row_id"] != 2]
        with pytest.raises(CountMismatch) as exc:
            evaluate_batch_predictions(yes_no_dataset, two_fold_splits, partial, class_task)
        assert str(exc.value).startswith("Prediction count does not match: ")
        assert "repeat 0, fold 1, sample 0" in exc.value.diagnostic
        assert "missing row_ids [2]" in exc.value.diagnostic

    def test_duplicate_prediction(self, yes_no_dataset, two_fold_splits, correct_predictions, class_task):
        doubled = pd.concat([correct_predictions, correct_predictions.iloc[[0]]], ignore_index=True)
        with pytest.raises(CountMismatch, match=r"duplicate row_ids \[0\]"):
            evaluate_batch_predictions(yes_no_dataset, two_fold_splits, doubled, class_task)

    def test_result_does_not_depend_on_file_order(
        self, yes_no_dataset, two_fold_splits, correct_predictions, class_task
    ):
        reference = evaluate_batch_predictions(yes_no_dataset, two_fold_splits, correct_predictions, class_task)
        shuffled = correct_predictions.sample(frac=1.0, random_state=3).reset_index(drop=True)
        result = evaluate_batch_predictions(yes_no_dataset, two_fold_splits, shuffled, class_task)
        assert result.model_dump() == reference.model_dump()

    @pytest.mark.parametrize("position", [0, -1])
    def test_row_out_of_range_anywhere(
        self, yes_no_dataset, two_fold_splits, correct_predictions, class_task, position
    ):
        bad = correct_predictions.copy()
        bad.loc[bad.index[position], "row_id"] = 7
        with pytest.raises(RowOutOfRange) as exc:
            evaluate_batch_predictions(yes_no_dataset, two_fold_splits, bad, class_task)
        assert exc.value.row_id == 7

    def test_row_out_of_range_wins_over_incompleteness(
        self, yes_no_dataset, two_fold_splits, make_predictions, class_task
    ):
        preds = make_predictions([(0, 0, 0, 0, 0.9), (9, 0, 1, 0, 0.9)])
        with pytest.raises(RowOutOfRange):
            evaluate_batch_predictions(yes_no_dataset, two_fold_splits, preds, class_task)

    def test_single_class_partition_drops_auc(self, yes_no_dataset, make_predictions, class_task):
        # fold 0 only holds "yes" rows
        splits = SplitAssignment.from_entries([(0, 0, 0, 0), (2, 0, 0, 0), (1, 0, 1, 0), (3, 0, 1, 0)])
        preds = make_predictions(
            [(0, 0, 0, 0, 0.9), (2, 0, 0, 0, 0.8), (1, 0, 1, 0, 0.2), (3, 0, 1, 0, 0.3)]
        )
        result = evaluate_batch_predictions(yes_no_dataset, splits, preds, class_task)
        assert result.get("area_under_roc_curve").value == "1"
        assert result.get("area_under_roc_curve", repeat=0, fold=0) is None
        assert result.get("predictive_accuracy", repeat=0, fold=0).value == "1"

    def test_missing_confidence_column(self, yes_no_dataset, two_fold_splits, correct_predictions, class_task):
        preds = correct_predictions.drop(columns=["confidence.no"])
        with pytest.raises(SchemaError, match="Attribute confidence.no not found among predictions"):
            evaluate_batch_predictions(yes_no_dataset, two_fold_splits, preds, class_task)

    def test_missing_class_attribute(self, yes_no_dataset, two_fold_splits, correct_predictions):
        task = EvaluationTaskModel(target_feature="label")
        with pytest.raises(SchemaError, match=r"Class attribute \(label\) not found"):
            evaluate_batch_predictions(yes_no_dataset, two_fold_splits, correct_predictions, task)

    def test_cost_matrix(self, yes_no_dataset, two_fold_splits, make_predictions):
        preds = make_predictions(
            [(0, 0, 0, 0, 0.9), (1, 0, 0, 0, 0.6), (2, 0, 1, 0, 0.9), (3, 0, 1, 0, 0.2)]
        )
        task = EvaluationTaskModel(target_feature="class", cost_matrix=[[0, 1], [5, 0]])
        result = evaluate_batch_predictions(yes_no_dataset, two_fold_splits, preds, task)
        assert result.get("total_cost").value == "5"
        assert result.get("average_cost").value == "1.25"
        assert result.get("total_cost", repeat=0, fold=1).value == "0"

    def test_cost_matrix_shape_mismatch(self, yes_no_dataset, two_fold_splits, correct_predictions):
        task = EvaluationTaskModel(target_feature="class", cost_matrix=[[0]])
        with pytest.raises(SchemaError):
            evaluate_batch_predictions(yes_no_dataset, two_fold_splits, correct_predictions, task)

    def test_unlabeled_rows(self, two_fold_splits, correct_predictions, class_task):
        from predeval.components.evaluation.dataset import Dataset

        frame = pd.DataFrame({"class": ["yes", "no", "yes", None]})
        ds = Dataset.from_frame(frame, nominal={"class": ["yes", "no"]})
        result = evaluate_batch_predictions(ds, two_fold_splits, correct_predictions, class_task)
        assert result.n_predictions == 4
        assert result.get("number_of_instances").value == "3"
        assert result.get("number_of_instances", repeat=0, fold=1).value == "1"


class TestLearningCurve:
    @pytest.fixture
    def curve_splits(self):
        return SplitAssignment.from_entries(
            [(r, 0, 0 if r < 2 else 1, s) for s in range(2) for r in range(4)]
        )

    @pytest.fixture
    def curve_predictions(self, make_predictions):
        rows = []
        for row_id in range(4):
            fold = 0 if row_id < 2 else 1
            yes = row_id % 2 == 0
            # sample 0 is always wrong, sample 1 always right
            rows.append((row_id, 0, fold, 0, 0.3 if yes else 0.7))
            rows.append((row_id, 0, fold, 1, 0.9 if yes else 0.2))
        return make_predictions(rows, with_sample=True)

    def test_global_scores_use_the_last_sample(self, yes_no_dataset, curve_splits, curve_predictions, class_task):
        result = evaluate_batch_predictions(yes_no_dataset, curve_splits, curve_predictions, class_task)
        assert result.task_kind == "learning_curve"
        assert result.n_predictions == 8
        assert result.get("predictive_accuracy").value == "1"
        assert result.get("number_of_instances").value == "4"

    def test_partition_records_carry_sample(self, yes_no_dataset, curve_splits, curve_predictions, class_task):
        result = evaluate_batch_predictions(yes_no_dataset, curve_splits, curve_predictions, class_task)
        early = result.get("predictive_accuracy", repeat=0, fold=0, sample=0)
        late = result.get("predictive_accuracy", repeat=0, fold=0, sample=1)
        assert early.value == "0"
        assert late.value == "1"
        assert early.sample_size == 2
        assert len(result.partition_records()) > 0
        assert all(r.sample is not None for r in result.partition_records())

    def test_missing_sample_column_warns(self, yes_no_dataset, curve_splits, correct_predictions, class_task, caplog):
        with caplog.at_level(logging.WARNING, logger="predeval"):
            with pytest.raises(CountMismatch):
                evaluate_batch_predictions(yes_no_dataset, curve_splits, correct_predictions, class_task)
        assert "no sample column" in caplog.text


class TestRegression:
    def test_perfect_predictions(self, numeric_dataset, two_fold_splits, make_regression_predictions):
        preds = make_regression_predictions([1.0, 2.0, 3.0, 4.0])
        task = EvaluationTaskModel(target_feature="target")
        result = evaluate_batch_predictions(numeric_dataset, two_fold_splits, preds, task)
        assert result.task_kind == "regression"
        assert result.get("mean_absolute_error").value == "0"
        assert result.get("r_squared").value == "1"
        assert result.get("relative_absolute_error").value == "0"
        assert result.get("mean_absolute_error", repeat=0, fold=0).value == "0"

    def test_one_off_prediction(self, numeric_dataset, two_fold_splits, make_regression_predictions):
        preds = make_regression_predictions([2.0, 2.0, 3.0, 4.0])
        task = EvaluationTaskModel(target_feature="target")
        result = evaluate_batch_predictions(numeric_dataset, two_fold_splits, preds, task)
        assert result.get("mean_absolute_error").value == "0.25"
        assert result.get("root_mean_squared_error").value == "0.5"
        assert result.get("r_squared").value == "0.8"
        assert result.get("root_relative_squared_error").value == "0.447214"

    def test_prediction_column_is_required(self, numeric_dataset, two_fold_splits, make_regression_predictions):
        preds = make_regression_predictions([1.0, 2.0, 3.0, 4.0]).drop(columns=["prediction"])
        task = EvaluationTaskModel(target_feature="target")
        with pytest.raises(SchemaError, match="Attribute prediction not found among predictions"):
            evaluate_batch_predictions(numeric_dataset, two_fold_splits, preds, task)

    def test_cost_matrix_is_rejected(self, numeric_dataset, two_fold_splits, make_regression_predictions):
        preds = make_regression_predictions([1.0, 2.0, 3.0, 4.0])
        task = EvaluationTaskModel(target_feature="target", cost_matrix=[[0.0]])
        with pytest.raises(SchemaError):
            evaluate_batch_predictions(numeric_dataset, two_fold_splits, preds, task)


class TestBootstrap:
    def test_point_632_estimate(self, yes_no_dataset, two_fold_splits, make_predictions):
        preds = make_predictions(
            [
                (0, 0, 0, 0, 0.9, 0),
                (1, 0, 0, 0, 0.2, 0),
                (2, 0, 1, 0, 0.9, 0),
                (3, 0, 1, 0, 0.2, 0),
                # in-bag resubstitution predictions, both wrong
                (2, 0, 0, 0, 0.1, 1),
                (3, 0, 0, 0, 0.8, 1),
            ]
        )
        task = EvaluationTaskModel(target_feature="class", estimation_procedure="bootstrapping")
        result = evaluate_batch_predictions(yes_no_dataset, two_fold_splits, preds, task)
        assert result.bootstrap
        assert result.get("predictive_accuracy").value == "0.632"
        assert result.get("number_of_instances").value == "4"
        assert result.get("predictive_accuracy", repeat=0, fold=0).value == "0.632"
        assert result.get("predictive_accuracy", repeat=0, fold=1).value == "1"


def test_evaluate_prediction_files(tmp_path):
    (tmp_path / "data.csv").write_text("x,class\n0.1,yes\n0.2,no\n0.3,yes\n0.4,no\n")
    (tmp_path / "splits.csv").write_text(
        "type,rowid,repeat,fold\n"
        "TEST,0,0,0\nTEST,1,0,0\nTRAIN,2,0,0\nTRAIN,3,0,0\n"
        "TRAIN,0,0,1\nTRAIN,1,0,1\nTEST,2,0,1\nTEST,3,0,1\n"
    )
    (tmp_path / "predictions.csv").write_text(
        "repeat,fold,row_id,prediction,confidence.yes,confidence.no\n"
        "0,0,0,yes,0.9,0.1\n0,0,1,no,0.2,0.8\n0,1,2,yes,0.9,0.1\n0,1,3,yes,0.6,0.4\n"
    )
    result = evaluate_prediction_files(
        tmp_path / "data.csv",
        tmp_path / "splits.csv",
        tmp_path / "predictions.csv",
        EvaluationTaskModel(target_feature="class"),
        nominal={"class": ["yes", "no"]},
    )
    assert result.get("predictive_accuracy").value == "0.75"
    assert result.get("predictive_accuracy", repeat=0, fold=0).value == "1"
    assert result.get("predictive_accuracy", repeat=0, fold=1).value == "0.5"


class TestSingleFold:
    @pytest.fixture
    def one_fold_splits(self):
        return SplitAssignment.from_entries([(r, 0, 0, 0) for r in range(4)])

    @pytest.fixture
    def one_fold_predictions(self, make_predictions):
        return make_predictions([(r, 0, 0, 0, 0.9 if r % 2 == 0 else 0.2) for r in range(4)])

    def test_complete(self, yes_no_dataset, one_fold_splits, one_fold_predictions, class_task):
        result = evaluate_batch_predictions(yes_no_dataset, one_fold_splits, one_fold_predictions, class_task)
        assert result.dimensions == {"repeats": 1, "folds": 1, "samples": 1}
        assert result.get("predictive_accuracy").value == "1"
        assert result.get("number_of_instances", repeat=0, fold=0).value == "4"

    def test_missing_row_2(self, yes_no_dataset, one_fold_splits, one_fold_predictions, class_task):
        partial = one_fold_predictions[one_fold_predictions["row_id"] != 2]
        with pytest.raises(CountMismatch) as exc:
            evaluate_batch_predictions(yes_no_dataset, one_fold_splits, partial, class_task)
        assert exc.value.diagnostic == (
            "repeat 0, fold 0, sample 0: expected 4 predictions, got 3; missing row_ids [2]"
        )


class TestIntegerClassLabels:
    def _write(self, root, class_cells):
        rows = "".join(f"{i},{c}\n" for i, c in enumerate(class_cells))
        (root / "data.csv").write_text("x,class\n" + rows)
        (root / "splits.csv").write_text("rowid\n0\n1\n2\n3\n")
        (root / "predictions.csv").write_text(
            "row_id,confidence.0,confidence.1\n0,0.9,0.1\n1,0.2,0.8\n2,0.9,0.1\n3,0.5,0.5\n"
        )

    def test_missing_cell_does_not_hide_coded_labels(self, tmp_path):
        # "?" makes pandas read the label column as float64
        self._write(tmp_path, ["0", "1", "0", "?"])
        result = evaluate_prediction_files(
            tmp_path / "data.csv",
            tmp_path / "splits.csv",
            tmp_path / "predictions.csv",
            EvaluationTaskModel(target_feature="class"),
            nominal={"class": ["0", "1"]},
        )
        assert result.get("predictive_accuracy").value == "1"
        assert result.get("number_of_instances").value == "3"

    def test_undeclared_label_is_rejected(self, tmp_path):
        self._write(tmp_path, ["0", "1", "2", "0"])
        with pytest.raises(SchemaError, match="not among the declared values"):
            evaluate_prediction_files(
                tmp_path / "data.csv",
                tmp_path / "splits.csv",
                tmp_path / "predictions.csv",
                EvaluationTaskModel(target_feature="class"),
                nominal={"class": ["0", "1"]},
            )
