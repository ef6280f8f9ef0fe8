"""Nissan Leaf 车型默认参数.

电池容量相关数值按车型代际区分,表单默认值取第一代 24kWh 车型.
"""

from typing import Final

CONFIG_NAMESPACE: Final[str] = "xnl"

DEFAULT_MODEL_YEAR: Final[int] = 2012
MIN_MODEL_YEAR: Final[int] = 2011
DEFAULT_CABINTEMP_OFFSET: Final[float] = 0.0

GEN_1_NEW_CAR_GIDS: Final[int] = 281
GEN_1_NEW_CAR_AH: Final[int] = 66
GEN_1_30_NEW_CAR_GIDS: Final[int] = 356
GEN_1_30_NEW_CAR_AH: Final[int] = 79
GEN_2_40_NEW_CAR_GIDS: Final[int] = 502
GEN_2_40_NEW_CAR_AH: Final[int] = 115

# EV SYSTEM ACTIVATION REQUEST 输出端口: 值 -> 显示名称
EV_REQUEST_PORTS: Final[dict[str, str]] = {
    "1": "SW_12V (DA26 pin 18)",
    "3": "EGPIO_2",
    "4": "EGPIO_3",
    "5": "EGPIO_4",
    "6": "EGPIO_5",
    "7": "EGPIO_6",
    "8": "EGPIO_7",
    "9": "EGPIO_8",
}
DEFAULT_PIN_EV: Final[str] = "1"

SUFF_RANGE_CALC_OPTIONS: Final[tuple[str, ...]] = ("ideal", "est")
SOC_PERCENT_MIN: Final[int] = 0
SOC_PERCENT_MAX: Final[int] = 100

__all__ = [
    "CONFIG_NAMESPACE",
    "DEFAULT_CABINTEMP_OFFSET",
    "DEFAULT_MODEL_YEAR",
    "DEFAULT_PIN_EV",
    "EV_REQUEST_PORTS",
    "GEN_1_30_NEW_CAR_AH",
    "GEN_1_30_NEW_CAR_GIDS",
    "GEN_1_NEW_CAR_AH",
    "GEN_1_NEW_CAR_GIDS",
    "GEN_2_40_NEW_CAR_AH",
    "GEN_2_40_NEW_CAR_GIDS",
    "MIN_MODEL_YEAR",
    "SOC_PERCENT_MAX",
    "SOC_PERCENT_MIN",
    "SUFF_RANGE_CALC_OPTIONS",
]
