# pages/single_asset.py
from __future__ import annotations

from dash import dcc, html, Input, Output, State
import plotly.graph_objs as go

from crossover.backtesting import Backtester
from crossover.config import BacktestConfig, parse_windows
from crossover.data_loader import YahooDataProvider
from crossover.errors import CrossoverError


INPUT_ROW = {
    "display": "flex",
    "gap": "8px",
    "marginBottom": "16px",
    "flexWrap": "wrap",
}

BUTTON = {
    "padding": "6px 14px",
    "borderRadius": "8px",
    "border": "none",
    "backgroundColor": "#2563eb",
    "color": "white",
    "cursor": "pointer",
}


def layout(defaults=None):
    defaults = defaults or {}
    return html.Div(
        [
            html.H2("SMA Crossover", style={"marginBottom": "16px"}),
            html.Div(
                style=INPUT_ROW,
                children=[
                    dcc.Input(
                        id="x-ticker",
                        type="text",
                        value=(defaults.get("tickers") or "^GSPC").split(",")[0],
                        placeholder="Ticker",
                        style={"width": "120px"},
                    ),
                    dcc.Input(
                        id="x-start-date",
                        type="text",
                        value=defaults.get("start", "2010-01-01"),
                        placeholder="Start (YYYY-MM-DD)",
                        style={"width": "150px"},
                    ),
                    dcc.Input(
                        id="x-end-date",
                        type="text",
                        value=defaults.get("end", "2024-01-01"),
                        placeholder="End (YYYY-MM-DD)",
                        style={"width": "150px"},
                    ),
                    dcc.Input(
                        id="x-window",
                        type="number",
                        value=50,
                        placeholder="SMA window",
                        style={"width": "110px"},
                    ),
                    dcc.Input(
                        id="x-rf",
                        type="number",
                        value=0.0,
                        placeholder="Risk-free (annual)",
                        style={"width": "140px", "step": "0.005"},
                    ),
                    html.Button("Run Backtest", id="run-crossover", style=BUTTON),
                ],
            ),
            html.Div(id="crossover-stats", style={"marginBottom": "12px"}),
            dcc.Graph(id="crossover-price-graph", style={"height": "500px"}),
            dcc.Graph(id="crossover-equity-graph", style={"height": "300px"}),
        ]
    )


def _fmt(value, pattern):
    return "n/a" if value is None else pattern.format(value)


def register_callbacks(app, data_provider: YahooDataProvider):
    @app.callback(
        [
            Output("crossover-price-graph", "figure"),
            Output("crossover-equity-graph", "figure"),
            Output("crossover-stats", "children"),
        ],
        Input("run-crossover", "n_clicks"),
        [
            State("x-ticker", "value"),
            State("x-start-date", "value"),
            State("x-end-date", "value"),
            State("x-window", "value"),
            State("x-rf", "value"),
        ],
        prevent_initial_call=True,
    )
    def run_crossover_backtest(n_clicks, ticker, start_date, end_date, window, rf):
        try:
            window = parse_windows("" if window is None else str(window))[0]
            config = BacktestConfig(tickers=(ticker,), windows=(window,), risk_free_rate=float(rf or 0.0))
            price_series = data_provider.get_price_series(ticker, start_date, end_date)
            result = Backtester(config).run({ticker: price_series}, window)
        except CrossoverError as exc:
            return go.Figure(), go.Figure(), html.Div(f"{type(exc).__name__}: {exc}", style={"color": "#dc2626"})

        summary = result.summaries[0]
        fig_price = go.Figure()
        fig_equity = go.Figure()

        asset = result.assets.get(ticker)
        if asset is not None:
            df = asset.df
            fig_price.add_trace(go.Scatter(x=df.index, y=df["price"], name="Price"))
            fig_price.add_trace(go.Scatter(x=df.index, y=df["sma"], name=f"SMA {window}"))

            buys = df.iloc[list(asset.signals.buys)]
            sells = df.iloc[list(asset.signals.sells)]
            fig_price.add_trace(go.Scatter(
                x=buys.index, y=buys["price"], mode="markers",
                name="Buy", marker=dict(symbol="triangle-up", size=9, color="#16a34a")))
            fig_price.add_trace(go.Scatter(
                x=sells.index, y=sells["price"], mode="markers",
                name="Sell", marker=dict(symbol="triangle-down", size=9, color="#dc2626")))

            realized = asset.realized_returns
            if not realized.empty:
                fig_equity.add_trace(go.Scatter(x=realized.index, y=(1 + realized).cumprod(), name="Equity"))

        fig_price.update_layout(
            margin=dict(l=40, r=20, t=40, b=30),
            legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        )
        fig_equity.update_layout(margin=dict(l=40, r=20, t=40, b=30), showlegend=False)

        if not summary.ok:
            stats_html = html.Div(f"{summary.error}: {summary.error_message}", style={"color": "#dc2626"})
        else:
            lo, hi = summary.bootstrap_ci
            stats_html = html.Ul(
                [
                    html.Li(f"Trades: {summary.n_trades} ({summary.n_observations} return days)"),
                    html.Li(f"Annualized Return: {_fmt(summary.annualized_return, '{:.2f}%')}"),
                    html.Li(f"Sharpe: {_fmt(summary.sharpe, '{:.2f}')}"),
                    html.Li(f"Sortino: {_fmt(summary.sortino, '{:.3f}')}"),
                    html.Li(f"t-stat: {summary.t_statistic:.2f} (p = {summary.p_value:.4f})"),
                    html.Li(f"Bootstrap 95% CI of mean daily return: [{lo:.5f}, {hi:.5f}]"),
                    html.Li(f"Max Drawdown: {_fmt(summary.max_drawdown, '{:.2%}')}"),
                    html.Li(f"Annualized Vol: {_fmt(summary.annualized_volatility, '{:.2%}')}"),
                    html.Li(f"Hit Rate: {_fmt(summary.hit_rate, '{:.1%}')}"),
                ]
            )
        return fig_price, fig_equity, stats_html
