"""
Console reporting for the maternal health analysis.
"""

from typing import Dict, Optional

from .stats import GroupSummary, LinearModel


def format_report(
    prediction: float,
    predictor_value: float,
    risk_summary: Dict[str, GroupSummary],
    model: Optional[LinearModel] = None,
) -> str:
    """Build the human-readable prediction and risk summary text."""
    lines = ["", "--- Prediction Analysis ---"]
    lines.append(f"Predicted MMR if Skilled Attendance is {predictor_value:g}%: {prediction:.2f}")
    if model is not None:
        lines.append(
            f"Model: {model.response} = {model.intercept:.2f} "
            f"{'-' if model.slope < 0 else '+'} {abs(model.slope):.3f} * {model.predictor} "
            f"(R^2 = {model.r_squared:.3f}, n = {model.n_obs})"
        )

    lines += ["", "--- Risk Level Summary ---"]
    lines.append(f"{'risk_level':<14}{'rows':>6}{'mean attendance %':>20}")
    for level, summary in risk_summary.items():
        lines.append(f"{str(level):<14}{summary.count:>6}{summary.mean:>20.2f}")
    return "\n".join(lines)


def print_report(prediction, predictor_value, risk_summary, model=None) -> None:
    print(format_report(prediction, predictor_value, risk_summary, model))
