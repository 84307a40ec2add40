from dataclasses import dataclass


@dataclass(frozen=True)
class CalculatorSettings:
    default_team_size: int = 50
    default_avg_salary: float = 85000.0
    default_turnover_rate: float = 15.0

    neutral_severity: int = 3

    high_multiplier_threshold: float = 4.0
    medium_multiplier_threshold: float = 2.5

    currency_unit: str = "CAD"

    animate_counters: bool = True
    counter_duration_ms: int = 800
    counter_frame_ms: int = 40

    page_title: str = "The Retention Cost Iceberg"
    log_level: str = "INFO"


SETTINGS = CalculatorSettings()
