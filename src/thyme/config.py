"""Configuration models and helpers for reports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .aggregation import DEFAULT_MAX_BARS
from .models import LabelFunc
from .normalization import LABEL_FUNCS


@dataclass(slots=True)
class ReportSettings:
    """How a stream is labeled and summarized."""

    max_bars: int = DEFAULT_MAX_BARS
    label_mode: str = "app"
    sample_interval: timedelta = timedelta(seconds=30)

    @property
    def label_func(self) -> LabelFunc:
        return LABEL_FUNCS[self.label_mode]

    @classmethod
    def from_options(
        cls,
        max_bars: int = DEFAULT_MAX_BARS,
        label_mode: str = "app",
        sample_seconds: float = 30.0,
    ) -> "ReportSettings":
        if label_mode not in LABEL_FUNCS:
            choices = ", ".join(sorted(LABEL_FUNCS))
            raise ValueError(f"Unknown label mode {label_mode!r}; expected one of {choices}")
        if max_bars < 1:
            raise ValueError("max_bars must be at least 1")
        return cls(
            max_bars=max_bars,
            label_mode=label_mode,
            sample_interval=timedelta(seconds=sample_seconds),
        )
