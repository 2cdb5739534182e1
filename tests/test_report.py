"""Tests for report rendering."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from exovet.models.prediction import MANUAL_ENTRY, PredictionOutcome
from exovet.services.report import (
    MANUAL_NOTICE,
    classify,
    expert_display_name,
    format_fixed,
    render_report,
    report_to_text,
)

K001_RESULT = MappingProxyType(
    {
        "candidate_id": "K001",
        "expert_01_proba": 0.9,
        "expert_02_proba": 0.87,
        "final_score": 0.82,
    }
)


class TestRenderReport:
    def test_correct_planet(self) -> None:
        report = render_report(PredictionOutcome(result=K001_RESULT, ground_truth="PLANET"))

        assert report.final_prediction == "PLANET"
        assert report.is_correct is True
        assert report.status == "correct"
        assert report.headline == "Result: Correct"
        assert report.ground_truth == "PLANET"
        assert report.notice is None

    def test_incorrect_when_disposition_differs(self) -> None:
        report = render_report(
            PredictionOutcome(result=K001_RESULT, ground_truth="FALSE_POSITIVE")
        )

        assert report.final_prediction == "PLANET"
        assert report.is_correct is False
        assert report.status == "incorrect"
        assert report.headline == "Result: Incorrect"

    def test_manual_entry_has_notice_and_no_comparison(self) -> None:
        report = render_report(PredictionOutcome(result=K001_RESULT, ground_truth=MANUAL_ENTRY))

        assert report.manual_entry
        assert report.notice == MANUAL_NOTICE
        assert report.ground_truth is None
        assert report.is_correct is None
        assert report.status is None
        assert report.headline is None

    def test_expert_lines(self) -> None:
        report = render_report(PredictionOutcome(result=K001_RESULT, ground_truth="PLANET"))

        assert [e.name for e in report.experts] == ["expert 01", "expert 02"]
        assert [e.percent for e in report.experts] == ["90.00", "87.00"]
        assert report.experts[0].text == "expert 01: 90.00% chance of being a planet"

    def test_non_expert_keys_skipped(self) -> None:
        result = {"expert_01_proba": 0.5, "expert_notes": 1.0, "final_score": 0.2}
        report = render_report(PredictionOutcome(result=result, ground_truth=MANUAL_ENTRY))
        assert [e.key for e in report.experts] == ["expert_01_proba"]

    def test_final_score_four_decimals(self) -> None:
        report = render_report(
            PredictionOutcome(result={"final_score": 0.123456}, ground_truth=MANUAL_ENTRY)
        )
        assert report.final_score_text == "0.1235"
        assert report.summary == "Final Model Prediction: FALSE_POSITIVE (Score: 0.1235)"

    def test_final_score_tie_rounds_up(self) -> None:
        report = render_report(
            PredictionOutcome(result={"final_score": 0.03125}, ground_truth=MANUAL_ENTRY)
        )
        assert report.final_score_text == "0.0313"

    def test_expert_percent_full_scale(self) -> None:
        result = {"expert_01_proba": 1.0, "expert_02_proba": 0.0, "final_score": 0.5}
        report = render_report(PredictionOutcome(result=result, ground_truth=MANUAL_ENTRY))
        assert [e.percent for e in report.experts] == ["100.00", "0.00"]

    def test_deterministic(self) -> None:
        outcome = PredictionOutcome(result=K001_RESULT, ground_truth="PLANET")
        assert render_report(outcome) == render_report(outcome)

    def test_text_lines(self) -> None:
        report = render_report(PredictionOutcome(result=K001_RESULT, ground_truth="PLANET"))
        assert report_to_text(report) == [
            "expert 01: 90.00% chance of being a planet",
            "expert 02: 87.00% chance of being a planet",
            "Ground Truth: PLANET",
            "Final Model Prediction: PLANET (Score: 0.8200)",
            "Result: Correct",
        ]

    def test_manual_text_lines_start_with_notice(self) -> None:
        report = render_report(
            PredictionOutcome(result={"final_score": 0.1}, ground_truth=MANUAL_ENTRY)
        )
        assert report_to_text(report) == [
            MANUAL_NOTICE,
            "Final Model Prediction: FALSE_POSITIVE (Score: 0.1000)",
        ]


@pytest.mark.parametrize(
    ("score", "expected"),
    [(0.82, "PLANET"), (0.5000001, "PLANET"), (0.5, "FALSE_POSITIVE"), (0.0, "FALSE_POSITIVE")],
)
def test_classify_threshold(score: float, expected: str) -> None:
    assert classify(score) == expected


def test_expert_display_name() -> None:
    assert expert_display_name("expert_09_proba") == "expert 09"


@pytest.mark.parametrize(
    ("value", "places", "expected"),
    [
        (0.125, 2, "0.13"),
        (0.375, 2, "0.38"),
        (0.03125, 4, "0.0313"),
        (1.005, 2, "1.00"),  # stored just below the tie
        (-0.125, 2, "-0.13"),
        (2.5, 0, "3"),
    ],
)
def test_format_fixed_ties_round_away_from_zero(value: float, places: int, expected: str) -> None:
    assert format_fixed(value, places) == expected
