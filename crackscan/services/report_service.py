"""Отчёт об анализе для слоя представления."""
from __future__ import annotations

from typing import Dict

from crackscan.models.analysis_model import Metrics, Severity

SEVERITY_COLORS: Dict[Severity, str] = {
    Severity.CRITICAL: "red",
    Severity.MODERATE: "orange",
    Severity.MINOR: "green",
}


def severity_color(severity: Severity) -> str:
    return SEVERITY_COLORS.get(severity, "gray")


def build_report(metrics: Metrics) -> Dict[str, str]:
    """
    Поля панели «Analysis Report»: покрытие, уровень, размер, число пикселей, рекомендация.
    """
    return {
        "crack_coverage": f"{metrics.crack_percentage_display}%",
        "severity": metrics.severity.value,
        "severity_color": severity_color(metrics.severity),
        "image_size": metrics.dimensions,
        "crack_pixels": str(metrics.crack_pixel_count),
        "recommendation": metrics.recommendation,
    }


def format_report(metrics: Metrics) -> str:
    report = build_report(metrics)
    lines = [
        "Analysis Report",
        f"  Crack Coverage: {report['crack_coverage']}",
        f"  Severity Level: {report['severity']}",
        f"  Image Size:     {report['image_size']}",
        f"  Crack Pixels:   {report['crack_pixels']}",
        f"  Recommendation: {report['recommendation']}",
    ]
    return "\n".join(lines)
