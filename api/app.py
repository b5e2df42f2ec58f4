from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Tuple

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from portfolio_model import (
    ASSET_TYPES,
    Address,
    Asset,
    Portfolio,
    SimulationConfig,
    SimulationInvariantError,
    SimulationRunner,
    ValidationError,
)

# Process environment wins over the local .env file
load_dotenv(Path(__file__).parent / ".env", override=False)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)

ASSET_FIELDS = {
    "name", "symbol", "quantity", "purchase_price", "volatility", "mean_return",
    "low_price_threshold", "rate", "address", "unit",
}


def _build_asset(record: Any) -> Asset:
    if not isinstance(record, dict):
        raise ValueError("Each asset must be an object")
    type_name = record.get("type")
    cls = ASSET_TYPES.get(type_name)
    if cls is None:
        raise ValueError(f"Unknown asset type: {type_name!r}. Expected one of {sorted(ASSET_TYPES)}")

    fields = {key: value for key, value in record.items() if key in ASSET_FIELDS}
    if isinstance(fields.get("address"), dict):
        try:
            fields["address"] = Address(**fields["address"])
        except TypeError as e:
            raise ValueError(f"Invalid address: {e}") from e
    try:
        return cls(**fields)
    except TypeError as e:
        raise ValueError(f"Invalid {type_name} fields: {e}") from e


def _build_portfolio(payload: Dict[str, Any]) -> Portfolio:
    info = payload.get("portfolio", {})
    if not isinstance(info, dict):
        raise ValueError("'portfolio' must be an object")
    portfolio = Portfolio(info.get("name", "Portfolio"), info.get("owner", ""))

    assets = payload.get("assets", [])
    if not isinstance(assets, list) or not assets:
        raise ValueError("'assets' must be a non-empty list")
    for record in assets:
        portfolio.add_asset(_build_asset(record))
    return portfolio


def _build_config(payload: Dict[str, Any]) -> SimulationConfig:
    # Request values override PORTFOLIO_SIM_* environment defaults
    base = SimulationConfig.from_env()
    overrides = payload.get("config", {})
    if not isinstance(overrides, dict):
        raise ValueError("'config' must be an object")
    seed = overrides.get("random_seed", base.random_seed)
    try:
        return SimulationConfig(
            num_days=int(overrides.get("num_days", base.num_days)),
            event_probability=float(overrides.get("event_probability", base.event_probability)),
            random_seed=None if seed is None else int(seed),
            top_movers=int(overrides.get("top_movers", base.top_movers)),
        )
    except (TypeError, OverflowError) as e:
        raise ValueError(f"Invalid config value: {e}") from e


def _parse_start_date(raw: Any) -> date | None:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise ValueError("'start_date' must be an ISO date string (YYYY-MM-DD)")
    return date.fromisoformat(raw)


def _summary_rows(portfolio: Portfolio) -> List[Dict[str, Any]]:
    return [
        {
            "key": row.key,
            "symbol": row.symbol,
            "name": row.name,
            "total_quantity": row.total_quantity,
            "average_purchase_price": round(row.average_purchase_price, 4),
            "total_cost": round(row.total_cost, 2),
            "total_value": round(row.total_value, 2),
            "total_profit": round(row.total_profit, 2),
        }
        for row in portfolio.summary_table.values()
    ]


def _simulate(payload: Dict[str, Any]) -> Dict[str, Any]:
    portfolio = _build_portfolio(payload)
    config = _build_config(payload)
    start_date = _parse_start_date(payload.get("start_date"))

    runner = SimulationRunner(portfolio, config, start_date=start_date)
    runner.run()
    runner.shutdown()

    daily = [
        {
            "date": snap["Date"].isoformat(),
            "total_value": round(snap["Total Value"], 2),
            "total_profit": round(snap["Total Profit"], 2),
            "active_event": snap["Active Event"],
            "news": snap["News"],
            "top_movers": snap["Top Movers"],
        }
        for snap in runner.snapshots
    ]
    logger.info("Simulated portfolio %r: %d assets, %d days", portfolio.name, len(portfolio), config.num_days)

    return {
        "success": True,
        "summary": {
            "total_value": round(portfolio.total_value(), 2),
            "total_cost": round(portfolio.total_cost(), 2),
            "total_profit": round(portfolio.total_profit(), 2),
            "allocation_by_type": {k: round(v, 4) for k, v in portfolio.allocation_by_type().items()},
        },
        "details": {
            "config": config.__dict__,
            "summary_table": _summary_rows(portfolio),
            "daily": daily,
        },
    }


@app.get("/health")
def health() -> Tuple[Any, int]:
    return jsonify({"ok": True, "service": "portfolio-model-api"}), 200


@app.post("/portfolio/api/v1/simulate")
def simulate() -> Tuple[Any, int]:
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"success": False, "error": "Request JSON body is required"}), 400
    if not isinstance(payload, dict):
        return jsonify({"success": False, "error": "Request JSON body must be an object"}), 400
    try:
        result = _simulate(payload)
    except (ValidationError, ValueError) as e:
        logger.info("Rejected simulate request: %s", e)
        return jsonify({"success": False, "error": str(e)}), 400
    except SimulationInvariantError as e:
        logger.info("Simulation diverged: %s", e)
        return jsonify({"success": False, "error": f"Simulation produced an invalid price: {e}"}), 422
    return jsonify(result), 200


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8001"))
    app.run(host="0.0.0.0", port=port, debug=False)
