# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Portfolio persistence.

``PortfolioStore`` is the contract hosts program against; ``JsonPortfolioStore``
keeps every portfolio in a single JSON document. Asset ids, current prices and
price history survive a round trip, subscribers do not.

End any active market event before saving, otherwise the perturbed
volatility and mean return are what gets written.
"""

import json
import logging
import os
import uuid
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Iterable, List, Protocol

from .asset import ASSET_TYPES, Address, Asset, PricePoint
from .enums import CommodityUnit
from .portfolio import Portfolio

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class PortfolioStore(Protocol):
    """Anything that can save and load a set of portfolios."""

    def save_all(self, portfolios: Iterable[Portfolio]) -> None:
        ...

    def load_all(self) -> List[Portfolio]:
        ...


def asset_to_dict(asset: Asset) -> Dict[str, Any]:
    """Plain-JSON representation of an asset."""
    record: Dict[str, Any] = {'type': asset.type_name, 'id': str(asset.asset_id)}
    for key, value in asset._clone_kwargs().items():
        if isinstance(value, Address):
            value = asdict(value)
        elif isinstance(value, CommodityUnit):
            value = value.name
        record[key] = value
    record['current_price'] = asset.current_price
    record['history'] = [[point.date.isoformat(), point.price] for point in asset.price_history]
    return record


def asset_from_dict(record: Dict[str, Any]) -> Asset:
    """Rebuild an asset from ``asset_to_dict`` output.

    Raises:
        ValueError: If the type is unknown or a field is missing
        ValidationError: If a stored value fails validation
    """
    data = dict(record)
    type_name = data.pop('type', None)
    cls = ASSET_TYPES.get(type_name)
    if cls is None:
        raise ValueError(f"Unknown asset type: {type_name!r}")
    try:
        asset_id = uuid.UUID(data.pop('id'))
        current_price = data.pop('current_price')
        history = [PricePoint(date.fromisoformat(d), float(p)) for d, p in data.pop('history', [])]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed {type_name} record: {e}") from e

    if isinstance(data.get('address'), dict):
        data['address'] = Address(**data['address'])
    try:
        asset = cls(**data)
    except TypeError as e:
        raise ValueError(f"Malformed {type_name} record: {e}") from e
    asset._restore_state(asset_id, current_price, history)
    return asset


def portfolio_to_dict(portfolio: Portfolio) -> Dict[str, Any]:
    return {
        'id': str(portfolio.portfolio_id),
        'name': portfolio.name,
        'owner': portfolio.owner,
        'assets': [asset_to_dict(a) for a in portfolio],
    }


def portfolio_from_dict(record: Dict[str, Any]) -> Portfolio:
    try:
        portfolio = Portfolio(record['name'], record['owner'])
        if 'id' in record:
            portfolio._portfolio_id = uuid.UUID(record['id'])
        assets = record.get('assets', [])
    except KeyError as e:
        raise ValueError(f"Malformed portfolio record, missing {e}") from e
    for asset_record in assets:
        portfolio.add_asset(asset_from_dict(asset_record))
    return portfolio


class JsonPortfolioStore:
    """Stores portfolios in one JSON file.

    Example:
        >>> store = JsonPortfolioStore("portfolios.json")
        >>> store.save_all([portfolio])
        >>> [p.name for p in store.load_all()]
        ['Main']
    """

    def __init__(self, path: str):
        self.path = path

    def save_all(self, portfolios: Iterable[Portfolio]) -> None:
        """Overwrite the file with the given portfolios.

        Parameters are saved as they are; end any active market event first
        or its perturbed volatility and mean return are stored.
        """
        records = [portfolio_to_dict(p) for p in portfolios]
        document = {'version': FORMAT_VERSION, 'portfolios': records}

        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        # Write then rename so a failed save leaves the previous file intact
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2)
        os.replace(tmp_path, self.path)
        logger.info("Saved %d portfolios to %s", len(records), self.path)

    def load_all(self) -> List[Portfolio]:
        """Load every stored portfolio. A missing file means no portfolios.

        Raises:
            ValueError: If the file is not a valid portfolio document
        """
        if not os.path.exists(self.path):
            logger.info("No portfolio file at %s", self.path)
            return []

        with open(self.path, encoding='utf-8') as f:
            try:
                document = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid portfolio file {self.path}: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get('portfolios'), list):
            raise ValueError(f"Invalid portfolio file {self.path}: missing 'portfolios' list")

        portfolios = [portfolio_from_dict(record) for record in document['portfolios']]
        logger.info("Loaded %d portfolios from %s", len(portfolios), self.path)
        return portfolios
