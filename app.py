import logging
import os

from dash import Dash, dcc, html, Input, Output
from dotenv import load_dotenv

from crossover.data_loader import YahooDataProvider

# import page modules
from pages.single_asset import layout as single_asset_layout, register_callbacks as register_single_asset
from pages.robustness import layout as robustness_layout, register_callbacks as register_robustness

load_dotenv()  # reads .env
DEFAULTS = {
    "tickers": os.getenv("CROSSOVER_TICKERS", "^GSPC,^DJI,^IXIC"),
    "start": os.getenv("CROSSOVER_START", "2000-01-01"),
    "end": os.getenv("CROSSOVER_END", "2024-01-01"),
}


# -------------------------------------------------------------------
# App + services
# -------------------------------------------------------------------
app = Dash(__name__, suppress_callback_exceptions=True)
server = app.server  # for gunicorn

data_provider = YahooDataProvider()

NAV_LINK = {
    "display": "block",
    "padding": "8px 10px",
    "borderRadius": "10px",
    "color": "white",
    "textDecoration": "none",
    "fontSize": "16px",
    "fontWeight": 500,
}

# -------------------------------------------------------------------
# Global layout: sidebar + main content
# -------------------------------------------------------------------
app.layout = html.Div(
    style={
        "display": "flex",
        "minHeight": "100vh",
        "fontFamily": "system-ui, -apple-system, BlinkMacSystemFont, sans-serif",
        "backgroundColor": "#e5e7eb",
    },
    children=[
        dcc.Location(id="url"),
        # Sidebar
        html.Div(
            style={
                "width": "240px",
                "background": "linear-gradient(180deg, #0f172a, #1e293b)",
                "color": "white",
                "padding": "24px 16px",
                "display": "flex",
                "flexDirection": "column",
                "gap": "16px",
            },
            children=[
                html.Div(
                    [
                        html.H1("Crossover", style={"fontSize": "30px", "marginBottom": "0", "marginTop": "6px"}),
                        html.Div(
                            "SMA backtests on index closes",
                            style={"fontSize": "12px", "color": "#9ca3af"},
                        ),
                    ]
                ),
                html.Hr(style={"borderColor": "#4b5563"}),
                html.Div(
                    [
                        dcc.Link("📈  Single asset", href="/crossover", style=NAV_LINK),
                        dcc.Link("🧪  Robustness", href="/robustness", style=NAV_LINK),
                    ]
                ),
            ],
        ),
        # Main content
        html.Div(
            id="page-content",
            style={
                "flex": "1",
                "padding": "28px 32px",
                "maxWidth": "1400px",
                "margin": "0 auto",
            },
        ),
    ],
)


# -------------------------------------------------------------------
# Routing callback
# -------------------------------------------------------------------
@app.callback(Output("page-content", "children"), Input("url", "pathname"))
def display_page(pathname):
    if pathname in ("/", None, "/crossover"):
        return single_asset_layout(DEFAULTS)
    elif pathname == "/robustness":
        return robustness_layout(DEFAULTS)
    return html.Div([html.H2("404 - Page not found")])


register_single_asset(app, data_provider)
register_robustness(app, data_provider)

# -------------------------------------------------------------------
# Run local
# -------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(debug=True)
