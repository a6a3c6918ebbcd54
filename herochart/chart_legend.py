"""Series toggle panel for the hero chart.

Purpose
-------
This module defines :class:`SeriesTogglePanel`, a widget-oriented controller
that renders one row per catalogued series into a layout box. Each row is
stably bound to a series id and exposes:

- a boolean visibility checkbox,
- an HTML label with the series color swatch.

Architecture notes
------------------
- The panel does not own visibility. Checkbox changes are forwarded to a
  ``on_toggle(series_id)`` callback (normally ``ViewportEngine.toggle_series``)
  and the rows are then re-synchronized from ``visible_series``. A rejected
  toggle (hiding the last visible series) therefore snaps the checkbox back.
- Programmatic checkbox writes are suspended per row so they are never
  mistaken for user toggles.

Examples
--------
>>> import ipywidgets as widgets
>>> from herochart.chart_legend import SeriesTogglePanel
>>> box = widgets.VBox()  # doctest: +SKIP
>>> panel = SeriesTogglePanel(box, on_toggle=print)  # doctest: +SKIP
>>> panel.sync(["portfolio"])  # doctest: +SKIP
"""

from __future__ import annotations

import html
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import ipywidgets as widgets

from .chart_catalog import SERIES, SeriesConfig, SeriesStyle


@dataclass
class SeriesRowModel:
    """Widget bundle for one toggle row bound to a series id."""

    series_id: str
    container: widgets.HBox
    toggle: widgets.Checkbox
    label_widget: widgets.HTML


class SeriesTogglePanel:
    """Render series checkboxes and route user toggles to a callback."""

    def __init__(
        self,
        layout_box: widgets.Box,
        *,
        on_toggle: Callable[[str], Any],
        series: Iterable[SeriesConfig] = SERIES,
    ) -> None:
        self._layout_box = layout_box
        self._on_toggle = on_toggle
        self._series: Dict[str, SeriesConfig] = {}
        self._rows: Dict[str, SeriesRowModel] = {}
        self._suspended_series_ids: set[str] = set()
        self._visible: frozenset[str] = frozenset()
        self._locked = False
        for cfg in series:
            self._series[cfg.id] = cfg
            self._rows[cfg.id] = self._create_row(cfg)
        self._layout_box.children = tuple(row.container for row in self._rows.values())

    @property
    def rows(self) -> Dict[str, SeriesRowModel]:
        return self._rows

    @property
    def locked(self) -> bool:
        """Return ``True`` when checkboxes are disabled (forced-series mode)."""
        return self._locked

    def set_locked(self, locked: bool) -> None:
        self._locked = bool(locked)
        for row in self._rows.values():
            row.toggle.disabled = self._locked

    def sync(self, visible_series: Iterable[str]) -> None:
        """Mirror ``visible_series`` into the checkboxes without firing toggles."""
        self._visible = frozenset(visible_series)
        for series_id, row in self._rows.items():
            self._set_toggle_value(row, series_id in self._visible)

    def _create_row(self, cfg: SeriesConfig) -> SeriesRowModel:
        toggle = widgets.Checkbox(
            value=False,
            description="",
            indent=False,
            layout=widgets.Layout(width="28px", min_width="28px", margin="0"),
        )
        label_widget = widgets.HTML(value=_label_html(cfg), layout=widgets.Layout(margin="0", width="100%"))
        container = widgets.HBox(
            [toggle, label_widget],
            layout=widgets.Layout(width="100%", align_items="center", margin="0", gap="6px"),
        )
        toggle.observe(lambda change, sid=cfg.id: self._on_toggle_changed(sid, change), names="value")
        return SeriesRowModel(series_id=cfg.id, container=container, toggle=toggle, label_widget=label_widget)

    def _set_toggle_value(self, row: SeriesRowModel, value: bool) -> None:
        if row.toggle.value == value:
            return
        self._suspended_series_ids.add(row.series_id)
        try:
            row.toggle.value = value
        finally:
            self._suspended_series_ids.discard(row.series_id)

    def _on_toggle_changed(self, series_id: str, change: Dict[str, Any]) -> None:
        """Forward a user checkbox change, then re-sync the row."""
        if change.get("name") != "value":
            return
        if series_id in self._suspended_series_ids:
            return
        if bool(change.get("new")) != (series_id not in self._visible):
            # Checkbox already agrees with the visible set.
            return
        self._on_toggle(series_id)
        row = self._rows.get(series_id)
        if row is not None:
            # The callback normally re-syncs through engine hooks; restore the
            # row from the last known visible set in case it did not.
            self._set_toggle_value(row, series_id in self._visible)


def _label_html(cfg: SeriesConfig, *, swatch_px: Optional[int] = 10) -> str:
    border = "dashed" if cfg.style is SeriesStyle.DASHED else "solid"
    color = html.escape(cfg.color)
    swatch = (
        f"<span style='display:inline-block;width:{swatch_px}px;height:{swatch_px}px;"
        f"border-radius:50%;background:{color};border:1px {border} {color};"
        "margin-right:6px'></span>"
    )
    return f"{swatch}{html.escape(cfg.label)}"


__all__ = ["SeriesRowModel", "SeriesTogglePanel"]
