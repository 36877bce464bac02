"""PriceLens — application entry point.

Boots the FastAPI internal server and provides the CLI entry point for
serving the API or analysing a candle file from disk.
"""

import logging

from fastapi import FastAPI

from pricelens.api.routers import router

app = FastAPI(title="PriceLens Internal API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("pricelens")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and dispatch to the requested command."""
    import argparse

    from pricelens.config import load_config

    parser = argparse.ArgumentParser(description="PriceLens market analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the internal API server")

    analyze = sub.add_parser("analyze", help="Analyse a candle file (.csv or .json)")
    analyze.add_argument("--file", required=True, help="Path to the candle file")
    analyze.add_argument(
        "--price",
        type=float,
        help="Current price (default: last close in the file)",
    )
    analyze.add_argument("--timeframe", help="Time horizon, e.g. 1h (default from config)")
    analyze.add_argument(
        "--indicators",
        action="store_true",
        help="Also print the indicator snapshot",
    )
    args = parser.parse_args(argv)

    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "serve":
        _run_server(config)
        return 0
    return _run_analysis(config, args.file, args.price, args.timeframe, args.indicators)


def _run_server(config) -> None:
    """Start uvicorn with the configured host and port."""
    import uvicorn

    from pricelens.api.routers import configure_routers

    configure_routers(config)
    logger.info("Starting PriceLens API on http://%s:%d", config.api_host, config.api_port)
    uvicorn.run(app, host=config.api_host, port=config.api_port, log_level=config.log_level.lower())


def _run_analysis(config, path, price, timeframe, with_indicators) -> int:
    """Load candles, run the analysis and print the report.

    Returns the process exit code (1 when no analysis could be produced).
    """
    from pricelens.analysis.orchestrator import analyze_indicators, analyze_price_points
    from pricelens.cli.report import format_indicator_snapshot, format_price_analysis
    from pricelens.market.conversion import convert_candles_to_ohlcv, get_data_quality_score
    from pricelens.market.loader import load_raw_candles

    data = convert_candles_to_ohlcv(load_raw_candles(path))
    if price is None and data:
        price = data[-1].close
    logger.info(
        "Loaded %d candles from %s (quality %.0f/100)",
        len(data), path, get_data_quality_score(data),
    )

    outcome = analyze_price_points(
        data,
        price or 0.0,
        timeframe or config.default_time_horizon,
        min_candles=config.min_analysis_candles,
    )
    format_price_analysis(outcome)
    if with_indicators:
        format_indicator_snapshot(
            analyze_indicators(data, volume_bins=config.volume_profile_bins)
        )
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    raise SystemExit(_run_cli())
