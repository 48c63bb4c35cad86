"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import DECK_SIZE


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    hand_size: int = Field(
        default=7,
        ge=1,
        le=10,
        description="Number of cards dealt to each player"
    )
    min_players: int = Field(
        default=2,
        ge=2,
        le=4,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=4,
        ge=2,
        le=4,
        description="Maximum number of players allowed"
    )
    finish_penalty: int = Field(
        default=2,
        ge=1,
        le=2,
        description="Cards drawn for a dirty finish or a finish on a power card"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't go below minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players

    def get_deck_size(self) -> int:
        """Get the total number of cards in the deck."""
        return DECK_SIZE


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
