from .account import Account
from .booking import Booking
from .excess import Excess
from .excess_action import ExcessAction
from .finance import Finance
from .bank_card import BankCard
from .notification import Notification


__all__ = ["Account", "Booking", "Excess", "ExcessAction", "Finance", "BankCard", "Notification"]
