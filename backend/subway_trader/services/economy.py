"""Economy snapshot: money, holdings, prices, location and in-game clock.

Snapshots are validated when built from a client payload and serialized back
to plain JSON objects at the persistence boundary.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from subway_trader.errors import ValidationError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def count_map(raw: Any, name: str, integral: bool) -> Dict[str, Any]:
    """Validate an item -> non-negative value mapping.

    ``integral`` restricts values to whole numbers (inventory counts); item
    costs may be fractional.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValidationError(f'{name} must be an object')
    out = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            raise ValidationError(f'{name} keys must be non-empty strings')
        if not _is_number(value) or value < 0:
            raise ValidationError(f'{name}[{key}] must be a non-negative number')
        if integral:
            if value != int(value):
                raise ValidationError(f'{name}[{key}] must be a whole number')
            value = int(value)
        out[key] = value
    return out


def parse_clock(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError('currentTime must be an ISO 8601 timestamp')
    text = raw.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        value = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f'currentTime is not a valid timestamp: {raw}')
    # Stored naive, in UTC when an offset was supplied
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def default_clock(now: Optional[datetime] = None) -> datetime:
    """A new game starts at 22:00 on the current day."""
    now = now or datetime.now()
    return now.replace(hour=22, minute=0, second=0, microsecond=0)


@dataclass
class EconomySnapshot:
    money: float
    inventory: Dict[str, int] = field(default_factory=dict)
    item_costs: Dict[str, float] = field(default_factory=dict)
    last_visited_station: str = 'Kipling'
    current_time: datetime = field(default_factory=default_clock)

    @classmethod
    def starting(cls, money: float, station: str) -> 'EconomySnapshot':
        return cls(money=money, last_visited_station=station)

    @classmethod
    def from_payload(cls, data: Any, default_station: str = 'Kipling') -> 'EconomySnapshot':
        if not isinstance(data, dict):
            raise ValidationError('Game state must be a JSON object')
        if 'money' not in data:
            raise ValidationError('money is required')
        money = data['money']
        if not _is_number(money):
            raise ValidationError('money must be a number')

        station = data.get('lastVisitedStation', default_station)
        if not isinstance(station, str) or not station.strip():
            raise ValidationError('lastVisitedStation must be a non-empty string')

        clock = data.get('currentTime')
        return cls(
            money=money,
            inventory=count_map(data.get('inventory'), 'inventory', integral=True),
            item_costs=count_map(data.get('itemCosts'), 'itemCosts', integral=False),
            last_visited_station=station.strip(),
            current_time=parse_clock(clock) if clock is not None else default_clock(),
        )

    def to_dict(self):
        return {
            'money': self.money,
            'inventory': dict(self.inventory),
            'itemCosts': dict(self.item_costs),
            'lastVisitedStation': self.last_visited_station,
            'currentTime': self.current_time.isoformat(),
        }
