# pages/robustness.py
from __future__ import annotations

from dash import dcc, html, Input, Output, State
import plotly.graph_objs as go
import pandas as pd

from crossover.config import BacktestConfig, parse_tickers, parse_windows, parse_sub_periods
from crossover.data_loader import YahooDataProvider
from crossover.errors import InvalidConfiguration
from crossover.robustness import RobustnessRunner, summaries_to_frame

from .single_asset import INPUT_ROW, BUTTON

COLUMNS = [
    ("asset", "Asset"),
    ("window_length", "Window"),
    ("period", "Period"),
    ("n_trades", "Trades"),
    ("annualized_return", "Ann. Return %"),
    ("sharpe", "Sharpe"),
    ("sortino", "Sortino"),
    ("t_statistic", "t"),
    ("p_value", "p"),
    ("ci_low", "CI low"),
    ("ci_high", "CI high"),
    ("error", "Error"),
]


def layout(defaults=None):
    defaults = defaults or {}
    return html.Div(
        [
            html.H2("Robustness", style={"marginBottom": "16px"}),
            html.Div(
                style=INPUT_ROW,
                children=[
                    dcc.Input(
                        id="rb-tickers",
                        type="text",
                        value=defaults.get("tickers", "^GSPC,^DJI,^IXIC"),
                        placeholder="Tickers (comma separated)",
                        style={"width": "220px"},
                    ),
                    dcc.Input(
                        id="rb-start",
                        type="text",
                        value=defaults.get("start", "2000-01-01"),
                        placeholder="Start",
                        style={"width": "120px"},
                    ),
                    dcc.Input(
                        id="rb-end",
                        type="text",
                        value=defaults.get("end", "2024-01-01"),
                        placeholder="End",
                        style={"width": "120px"},
                    ),
                    dcc.Input(
                        id="rb-windows",
                        type="text",
                        value="20,50,100,200",
                        placeholder="Windows",
                        style={"width": "140px"},
                    ),
                    dcc.Input(
                        id="rb-rf",
                        type="number",
                        value=0.0,
                        placeholder="Risk-free",
                        style={"width": "100px", "step": "0.005"},
                    ),
                    dcc.Input(
                        id="rb-reps",
                        type="number",
                        value=1000,
                        placeholder="Bootstrap reps",
                        style={"width": "110px"},
                    ),
                    dcc.Input(
                        id="rb-seed",
                        type="number",
                        value=42,
                        placeholder="Seed",
                        style={"width": "80px"},
                    ),
                ],
            ),
            html.Div(
                style=INPUT_ROW,
                children=[
                    dcc.Input(
                        id="rb-periods",
                        type="text",
                        value="early:2000-01-01:2007-12-31; mid:2008-01-01:2015-12-31; late:2016-01-01:2023-12-31",
                        placeholder="name:start:end; ...",
                        style={"width": "560px"},
                    ),
                    html.Button("Run Sweep", id="run-robustness", style=BUTTON),
                ],
            ),
            html.Div(id="robustness-status", style={"marginBottom": "12px"}),
            dcc.Graph(id="robustness-window-graph", style={"height": "320px"}),
            dcc.Graph(id="robustness-period-graph", style={"height": "320px"}),
            html.Div(id="robustness-table"),
        ]
    )


def _cell(value):
    if value is None or pd.isna(value):
        return ""
    if isinstance(value, float):
        return f"{value:.4f}"
    return str(value)


def _table(frame):
    rows = frame.reset_index().to_dict("records")
    return html.Table(
        [html.Tr([html.Th(label) for _, label in COLUMNS])]
        + [html.Tr([html.Td(_cell(row.get(key))) for key, _ in COLUMNS]) for row in rows],
        style={"borderCollapse": "collapse", "fontSize": "13px", "width": "100%"},
    )


def _bar_figure(frame, x_key, title):
    fig = go.Figure()
    ok = frame[frame["error"].isna()].reset_index()
    for asset, grp in ok.groupby("asset"):
        fig.add_trace(go.Bar(x=grp[x_key].astype(str), y=grp["annualized_return"], name=asset))
    fig.update_layout(
        title=title,
        barmode="group",
        margin=dict(l=40, r=20, t=40, b=30),
        yaxis=dict(title="Annualized return (%)"),
    )
    return fig


def register_callbacks(app, data_provider: YahooDataProvider):
    @app.callback(
        [
            Output("robustness-window-graph", "figure"),
            Output("robustness-period-graph", "figure"),
            Output("robustness-table", "children"),
            Output("robustness-status", "children"),
        ],
        Input("run-robustness", "n_clicks"),
        [
            State("rb-tickers", "value"),
            State("rb-start", "value"),
            State("rb-end", "value"),
            State("rb-windows", "value"),
            State("rb-rf", "value"),
            State("rb-reps", "value"),
            State("rb-seed", "value"),
            State("rb-periods", "value"),
        ],
        prevent_initial_call=True,
    )
    def run_robustness(n_clicks, tickers, start, end, windows, rf, reps, seed, periods):
        try:
            config = BacktestConfig(
                tickers=parse_tickers(tickers),
                windows=parse_windows(windows),
                risk_free_rate=float(rf or 0.0),
                bootstrap_reps=int(reps) if reps is not None else BacktestConfig.bootstrap_reps,
                bootstrap_seed=int(seed) if seed is not None else BacktestConfig.bootstrap_seed,
                sub_periods=parse_sub_periods(periods),
            )
            runner = RobustnessRunner(config)
        except InvalidConfiguration as exc:
            msg = html.Div(f"InvalidConfiguration: {exc}", style={"color": "#dc2626"})
            return go.Figure(), go.Figure(), None, msg

        prices = data_provider.get_multiple_price_series(config.tickers, start, end)
        summaries = runner.run(prices)
        frame = summaries_to_frame(summaries)
        if frame.empty:
            return go.Figure(), go.Figure(), None, html.Div("No results")

        full = frame.xs(config.period_name, level="period", drop_level=False)
        by_period = frame[frame.index.get_level_values("period") != config.period_name]

        fig_windows = _bar_figure(full, "window_length", "Full sample by window")
        fig_periods = go.Figure()
        if not by_period.empty:
            fig_periods = _bar_figure(
                by_period.xs(config.windows[0], level="window_length", drop_level=False),
                "period",
                f"Sub-periods (window {config.windows[0]})",
            )

        n_failed = int(frame["error"].notna().sum())
        status = html.Div(f"{len(frame)} runs, {n_failed} failed")
        return fig_windows, fig_periods, _table(frame), status
