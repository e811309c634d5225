class AuctionError(Exception):
    """Base error for auction operations. Views turn it into the error envelope."""

    code = 'auction_error'
    status = 400

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def as_dict(self):
        return {'message': self.message, 'code': self.code}


class NotFound(AuctionError):
    code = 'not_found'
    status = 404


class ValidationFailed(AuctionError):
    code = 'invalid'


class BudgetExceeded(AuctionError):
    code = 'budget_exceeded'
    status = 409


class RosterFull(AuctionError):
    code = 'roster_full'
    status = 409


class PermissionDenied(AuctionError):
    code = 'forbidden'
    status = 403


class NotAuthenticated(AuctionError):
    code = 'unauthenticated'
    status = 401
