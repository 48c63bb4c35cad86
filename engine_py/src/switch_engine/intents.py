"""
Player intents accepted by the action processor.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from .constants import SUIT_SYMBOLS

_SYMBOL_TO_SUIT = {symbol: suit for suit, symbol in SUIT_SYMBOLS.items()}


def normalize_suit(value: Any) -> Any:
    """Accept 'h', 'H' or '♥' for hearts; anything else is left for the engine to reject."""
    if isinstance(value, str):
        value = value.strip()
        return _SYMBOL_TO_SUIT.get(value, value.upper())
    return value


class PlayIntent(BaseModel):
    """Play one or more cards, in order."""
    type: Literal['play'] = 'play'
    card_ids: List[str] = Field(..., min_length=1, max_length=52)
    suit_choice: Optional[str] = None

    @field_validator('suit_choice', mode='before')
    @classmethod
    def _normalize_suit(cls, v):
        return normalize_suit(v)


class DrawIntent(BaseModel):
    """Draw, absorbing any pending attack."""
    type: Literal['draw'] = 'draw'


class DeclareLastIntent(BaseModel):
    """Declare LAST before playing out."""
    type: Literal['declare_last'] = 'declare_last'


class ChooseSuitIntent(BaseModel):
    """Name the active suit after an Ace."""
    type: Literal['choose_suit'] = 'choose_suit'
    suit: str

    @field_validator('suit', mode='before')
    @classmethod
    def _normalize_suit(cls, v):
        return normalize_suit(v)


Intent = Annotated[
    Union[PlayIntent, DrawIntent, DeclareLastIntent, ChooseSuitIntent],
    Field(discriminator='type')
]

_intent_adapter = TypeAdapter(Intent)


def parse_intent(data: Dict[str, Any]) -> Intent:
    """
    Parse raw intent data into the matching intent model.

    Args:
        data: Raw intent payload, e.g. {"type": "play", "card_ids": ["c4"]}

    Returns:
        Parsed intent model

    Raises:
        ValueError: If the intent type is unknown or data is malformed
    """
    if not isinstance(data, dict) or not data.get('type'):
        raise ValueError("Missing intent type")

    try:
        return _intent_adapter.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Invalid intent: {e.errors()[0]['msg']}")
