# MIT License
# Copyright (c) 2025 Hashborn

import re
from decimal import Context, Decimal
from typing import Annotated, Dict, Iterable, List

from pydantic import BaseModel, PlainSerializer

from .common import InvalidBalanceError

DEC_PRECISION = 18
_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)
_DEC_CONTEXT = Context(prec=100)

DENOM_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._-]{2,127}$")

def format_dec(value: Decimal) -> str:
    """Fixed 18-decimal rendering, e.g. ``0.100000000000000000``."""
    return f"{value.quantize(_DEC_QUANTUM, context=_DEC_CONTEXT):f}"

# Integers travel as JSON strings, decimals as fixed-precision strings
IntStr = Annotated[int, PlainSerializer(lambda v: str(v), return_type=str)]
Dec = Annotated[Decimal, PlainSerializer(format_dec, return_type=str)]

class Coin(BaseModel):
    denom: str
    amount: IntStr

    def validate_coin(self) -> None:
        if not DENOM_RE.match(self.denom):
            raise InvalidBalanceError(f"invalid denom: {self.denom!r}")
        if self.amount < 0:
            raise InvalidBalanceError(f"negative coin amount: {self.amount}{self.denom}")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

def new_coin(denom: str, amount: int) -> Coin:
    coin = Coin(denom=denom, amount=amount)
    coin.validate_coin()
    return coin

def validate_coins(coins: Iterable[Coin]) -> None:
    """Coins must be positive, valid and strictly sorted by denom."""
    prev = None
    for coin in coins:
        coin.validate_coin()
        if coin.amount == 0:
            raise InvalidBalanceError(f"zero coin amount for denom {coin.denom}")
        if prev is not None and coin.denom <= prev:
            raise InvalidBalanceError(f"coins not sorted or duplicated at denom {coin.denom}")
        prev = coin.denom

def add_coins(*coin_sets: Iterable[Coin]) -> List[Coin]:
    """Sums coins per denom. Result is sorted with zero entries dropped."""
    totals: Dict[str, int] = {}
    for coins in coin_sets:
        for coin in coins:
            coin.validate_coin()
            totals[coin.denom] = totals.get(coin.denom, 0) + coin.amount
    return [Coin(denom=d, amount=a) for d, a in sorted(totals.items()) if a != 0]

def sub_coins(coins: Iterable[Coin], minus: Iterable[Coin]) -> List[Coin]:
    """coins - minus per denom. Going below zero raises InvalidBalanceError."""
    totals = {c.denom: c.amount for c in add_coins(coins)}
    for coin in minus:
        coin.validate_coin()
        left = totals.get(coin.denom, 0) - coin.amount
        if left < 0:
            raise InvalidBalanceError(f"cannot subtract {coin} from {totals.get(coin.denom, 0)}{coin.denom}")
        totals[coin.denom] = left
    return [Coin(denom=d, amount=a) for d, a in sorted(totals.items()) if a != 0]
