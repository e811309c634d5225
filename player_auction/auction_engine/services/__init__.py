from .auction import AuctionService
from .auction_state import AuctionStateService
from .events import EventService
from .players import PlayersService
from .team_players import TeamPlayersService
from .teams import TeamsService
from .users import UsersService

__all__ = [
    'AuctionService',
    'AuctionStateService',
    'EventService',
    'PlayersService',
    'TeamPlayersService',
    'TeamsService',
    'UsersService',
]
