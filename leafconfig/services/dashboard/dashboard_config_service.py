"""Dashboard 仪表配置 Service.

职责:
- 提供车型专属的 9 个仪表(速度、电压、SOC、能耗、功率与四路温度)的刻度与色带
- 渲染前端仪表组件使用的 ``yAxis: [...]`` 配置片段
"""

from __future__ import annotations

from dataclasses import dataclass

from leafconfig.types import JsonDict


@dataclass(frozen=True, slots=True)
class PlotBand:
    """仪表色带."""

    start: float
    end: float
    class_name: str

    def to_dict(self) -> JsonDict:
        return {"from": self.start, "to": self.end, "className": self.class_name}


@dataclass(frozen=True, slots=True)
class Gauge:
    """单个仪表的刻度范围与色带."""

    key: str
    label: str
    minimum: float
    maximum: float
    plot_bands: tuple[PlotBand, ...]
    tick_interval: float | None = None

    def to_dict(self) -> JsonDict:
        payload: JsonDict = {
            "key": self.key,
            "label": self.label,
            "min": self.minimum,
            "max": self.maximum,
            "plotBands": [band.to_dict() for band in self.plot_bands],
        }
        if self.tick_interval is not None:
            payload["tickInterval"] = self.tick_interval
        return payload


def _bands(*items: tuple[float, float, str]) -> tuple[PlotBand, ...]:
    return tuple(PlotBand(start, end, class_name) for start, end, class_name in items)


GAUGES: tuple[Gauge, ...] = (
    Gauge(
        key="speed",
        label="Speed",
        minimum=0,
        maximum=135,
        plot_bands=_bands((0, 70, "green-band"), (70, 100, "yellow-band"), (100, 135, "red-band")),
    ),
    Gauge(
        key="voltage",
        label="Voltage",
        minimum=260,
        maximum=400,
        plot_bands=_bands((260, 305, "red-band"), (305, 355, "yellow-band"), (355, 400, "green-band")),
    ),
    Gauge(
        key="soc",
        label="SOC",
        minimum=0,
        maximum=100,
        plot_bands=_bands((0, 12.5, "red-band"), (12.5, 25, "yellow-band"), (25, 100, "green-band")),
    ),
    Gauge(
        key="efficiency",
        label="Efficiency",
        minimum=0,
        maximum=300,
        plot_bands=_bands((0, 120, "green-band"), (120, 250, "yellow-band"), (250, 300, "red-band")),
    ),
    Gauge(
        key="power",
        label="Power",
        minimum=-20,
        maximum=50,
        plot_bands=_bands(
            (-20, 0, "violet-band"),
            (0, 10, "green-band"),
            (10, 25, "yellow-band"),
            (25, 50, "red-band"),
        ),
    ),
    Gauge(
        key="charger_temp",
        label="Charger temperature",
        minimum=20,
        maximum=80,
        tick_interval=20,
        plot_bands=_bands((20, 65, "normal-band border"), (65, 80, "red-band border")),
    ),
    Gauge(
        key="battery_temp",
        label="Battery temperature",
        minimum=-15,
        maximum=65,
        tick_interval=25,
        plot_bands=_bands(
            (-15, 0, "red-band border"),
            (0, 40, "normal-band border"),
            (40, 65, "red-band border"),
        ),
    ),
    Gauge(
        key="inverter_temp",
        label="Inverter temperature",
        minimum=20,
        maximum=80,
        tick_interval=20,
        plot_bands=_bands((20, 70, "normal-band border"), (70, 80, "red-band border")),
    ),
    Gauge(
        key="motor_temp",
        label="Motor temperature",
        minimum=50,
        maximum=125,
        tick_interval=25,
        plot_bands=_bands((50, 110, "normal-band border"), (110, 125, "red-band border")),
    ),
)


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _render_gauge(gauge: Gauge) -> str:
    head = f"min: {_number(gauge.minimum)}, max: {_number(gauge.maximum)},"
    if gauge.tick_interval is not None:
        head = f"{head} tickInterval: {_number(gauge.tick_interval)},"
    bands = ",".join(
        f"{{ from: {_number(band.start)}, to: {_number(band.end)}, className: '{band.class_name}' }}"
        for band in gauge.plot_bands
    )
    return f"{head}plotBands: [{bands}]"


class DashboardConfigService:
    """仪表配置读取服务."""

    def __init__(self, gauges: tuple[Gauge, ...] = GAUGES) -> None:
        self._gauges = gauges

    @property
    def gauges(self) -> tuple[Gauge, ...]:
        return self._gauges

    def get_dashboard_config(self) -> JsonDict:
        """返回结构化的仪表配置,供 API 输出."""
        return {
            "gauges": [gauge.to_dict() for gauge in self._gauges],
            "gaugeset1": self.to_gaugeset(),
        }

    def to_gaugeset(self) -> str:
        """渲染 ``yAxis: [{...},{...}]`` 格式的仪表配置片段."""
        return "yAxis: [{" + "},{".join(_render_gauge(gauge) for gauge in self._gauges) + "}]"


__all__ = ["GAUGES", "DashboardConfigService", "Gauge", "PlotBand"]
