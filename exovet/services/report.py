"""Turn a prediction outcome into a display-ready report.

Rendering is a pure function of its input; all randomness lives in
:mod:`exovet.services.prediction`.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from exovet.models.prediction import (
    FINAL_SCORE_KEY,
    ExpertLine,
    PredictionOutcome,
    RenderedReport,
)
from exovet.models.sample import DISPOSITION_FALSE_POSITIVE, DISPOSITION_PLANET

MANUAL_NOTICE = "Prediction based on manual input."
PLANET_THRESHOLD = 0.5


def format_fixed(value: float, places: int) -> str:
    """Format *value* with *places* decimals, rounding exact ties away from zero.

    Works on the exact binary value of the float, so ``0.03125`` becomes
    ``"0.0313"`` while ``1.005`` (really 1.00499...) stays ``"1.00"``.
    """
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def is_expert_key(key: str) -> bool:
    return key.startswith("expert_") and key.endswith("_proba")


def expert_display_name(key: str) -> str:
    """``expert_01_proba`` -> ``expert 01``."""
    return key.replace("_proba", "", 1).replace("_", " ")


def classify(final_score: float) -> str:
    """Scores strictly above 0.5 are planets; 0.5 itself is not."""
    return DISPOSITION_PLANET if final_score > PLANET_THRESHOLD else DISPOSITION_FALSE_POSITIVE


def render_report(outcome: PredictionOutcome) -> RenderedReport:
    """Build the report for *outcome*.

    Expert lines keep the result's key order.  The correctness fields
    are only filled in when a real ground truth is available.
    """
    result = outcome.result

    experts: list[ExpertLine] = []
    for key, value in result.items():
        if not is_expert_key(key):
            continue
        name = expert_display_name(key)
        percent = format_fixed(value * 100, 2)
        experts.append(
            ExpertLine(
                key=key,
                name=name,
                probability=value,
                percent=percent,
                text=f"{name}: {percent}% chance of being a planet",
            )
        )

    final_score = float(result[FINAL_SCORE_KEY])
    final_prediction = classify(final_score)
    final_score_text = format_fixed(final_score, 4)
    summary = f"Final Model Prediction: {final_prediction} (Score: {final_score_text})"

    if outcome.is_manual:
        return RenderedReport(
            manual_entry=True,
            notice=MANUAL_NOTICE,
            experts=experts,
            final_prediction=final_prediction,
            final_score=final_score,
            final_score_text=final_score_text,
            summary=summary,
        )

    is_correct = final_prediction == outcome.ground_truth
    return RenderedReport(
        manual_entry=False,
        experts=experts,
        final_prediction=final_prediction,
        final_score=final_score,
        final_score_text=final_score_text,
        summary=summary,
        ground_truth=outcome.ground_truth,
        is_correct=is_correct,
        status="correct" if is_correct else "incorrect",
        headline=f"Result: {'Correct' if is_correct else 'Incorrect'}",
    )


def report_to_text(report: RenderedReport) -> list[str]:
    """Flatten *report* into display lines, in on-screen order."""
    lines: list[str] = []
    if report.notice:
        lines.append(report.notice)
    lines.extend(line.text for line in report.experts)
    if report.ground_truth is not None:
        lines.append(f"Ground Truth: {report.ground_truth}")
    lines.append(report.summary)
    if report.headline:
        lines.append(report.headline)
    return lines
